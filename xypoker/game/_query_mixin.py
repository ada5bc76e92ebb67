"""
xypoker/game/_query_mixin.py

Read-only queries and the legality predicates shared by the reducer and by
callers that want to validate a move before dispatching it.
"""

import logging
from typing import List, Optional

from .helpers import (
    first_empty_row,
    hidden_in_column,
    is_board_full,
    is_column_full,
)
from .player_state import PlayerState
from ..card import Card
from ..constants import (
    NUM_COLS,
    MAX_HIDDEN_CARDS,
    MAX_HIDDEN_PER_COLUMN,
    Phase,
)

logger = logging.getLogger(__name__)


class QueryMixin:
    """Mixin containing query methods and legal move calculation for GameState."""

    # --- Direct State Queries ---

    def get_opponent_index(self, player_index: int) -> int:
        """Returns the index of the opponent player, assuming 1v1."""
        return 1 - player_index

    def get_current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def dice(self) -> List[int]:
        """The shared dice; both players hold identical copies."""
        return self.players[0].dice if self.players else []

    def is_terminal(self) -> bool:
        return self.phase == Phase.ENDED

    def both_boards_full(self) -> bool:
        return all(is_board_full(player.board) for player in self.players)

    def all_cards(self) -> List[Card]:
        """Every card the game currently tracks: deck, hands and boards."""
        cards = list(self.deck)
        for player in self.players:
            cards.extend(player.hand)
            cards.extend(card for row in player.board for card in row if card)
        return cards

    # --- Legality ---

    def legal_columns(self, player_index: int) -> List[int]:
        board = self.players[player_index].board
        return [col for col in range(NUM_COLS) if not is_column_full(board, col)]

    def can_hide(self, player_index: int, card: Card, col_index: int) -> bool:
        """Whether a face-down placement into this column is allowed."""
        player = self.players[player_index]
        if card.is_joker:
            return False
        if player.hidden_cards_count >= MAX_HIDDEN_CARDS:
            return False
        return hidden_in_column(player.board, col_index) < MAX_HIDDEN_PER_COLUMN

    def placement_rejection(
        self, player_index: int, card_id: str, col_index: int, is_hidden: bool
    ) -> Optional[str]:
        """Reason a placement is illegal, or None when it may be applied."""
        if self.phase != Phase.PLAYING:
            return f"phase is {self.phase.value}"
        if player_index != self.current_player_index:
            return f"not P{player_index}'s turn"
        if not isinstance(col_index, int) or not 0 <= col_index < NUM_COLS:
            return f"column {col_index!r} out of range"
        player = self.players[player_index]
        hand_idx = player.find_in_hand(card_id)
        if hand_idx is None:
            return f"card {card_id} not in hand"
        if first_empty_row(player.board, col_index) is None:
            return f"column {col_index} is full"
        if is_hidden and not self.can_hide(player_index, player.hand[hand_idx], col_index):
            return "hidden-card limit reached"
        return None

    def is_legal_placement(
        self, player_index: int, card_id: str, col_index: int, is_hidden: bool = False
    ) -> bool:
        return self.placement_rejection(player_index, card_id, col_index, is_hidden) is None
