"""xypoker/game/helpers.py

Board helpers. A board is NUM_ROWS lists of NUM_COLS cells, row-major, and each
column fills from row 0 downwards, so a column never has a gap.
"""

import logging
from typing import List, Optional, TypeAlias, TYPE_CHECKING

from ..constants import NUM_ROWS, NUM_COLS, BOTTOM_ROW

if TYPE_CHECKING:
    from ..card import Card

logger = logging.getLogger(__name__)

Board: TypeAlias = List[List[Optional["Card"]]]


def empty_board() -> Board:
    return [[None] * NUM_COLS for _ in range(NUM_ROWS)]


def copy_board(board: Board) -> Board:
    """Copies the grid; cards are immutable and shared."""
    return [list(row) for row in board]


def column_cards(board: Board, col: int) -> List["Card"]:
    """Cards in a column, top to bottom, stopping at the first empty cell."""
    cards = []
    for row in range(NUM_ROWS):
        card = board[row][col]
        if card is None:
            break
        cards.append(card)
    return cards


def first_empty_row(board: Board, col: int) -> Optional[int]:
    """Row the next card in this column lands in, or None when full."""
    for row in range(NUM_ROWS):
        if board[row][col] is None:
            return row
    return None


def is_column_full(board: Board, col: int) -> bool:
    return board[BOTTOM_ROW][col] is not None


def is_board_full(board: Board) -> bool:
    return all(card is not None for row in board for card in row)


def hidden_in_column(board: Board, col: int) -> int:
    return sum(1 for card in column_cards(board, col) if card.is_hidden)


def serialize_card(card: Optional["Card"]) -> Optional[str]:
    """Serializes a card to string or None."""
    return str(card) if card else None
