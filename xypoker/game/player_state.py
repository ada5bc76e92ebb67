"""xypoker/game/player_state.py"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from .helpers import empty_board, Board

# Use TYPE_CHECKING guard for Card import
if TYPE_CHECKING:
    from ..card import Card


@dataclass
class PlayerState:
    id: str = ""
    hand: List["Card"] = field(default_factory=list)
    board: Board = field(default_factory=empty_board)
    dice: List[int] = field(default_factory=list)  # Same values for both players
    score: int = 0
    hidden_cards_count: int = 0
    bonuses_claimed: int = 0

    def find_in_hand(self, card_id: str) -> Optional[int]:
        """Index of the card in hand, or None."""
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return i
        return None
