"""xypoker/card.py"""

from dataclasses import dataclass, replace
from typing import List
import logging

from .constants import (
    ALL_RANKS,
    ALL_SUITS,
    JOKER_RANK,
    JOKER_SUIT,
    RANK_TO_STR,
    SUIT_TO_STR,
    HEARTS,
    DIAMONDS,
    CLUBS,
    SPADES,
    JACK,
    QUEEN,
    KING,
    ACE,
)

logger = logging.getLogger(__name__)

_STR_TO_RANK = {
    **{str(r): r for r in range(2, 11)},
    "T": 10,
    "J": JACK,
    "Q": QUEEN,
    "K": KING,
    "A": ACE,
}
_STR_TO_SUIT = {"H": HEARTS, "D": DIAMONDS, "C": CLUBS, "S": SPADES}


@dataclass(frozen=True)
class Card:
    """A playing card. Only the hidden flag ever differs between copies of one id."""

    suit: str
    rank: int
    id: str = ""  # Derived from suit/rank when empty
    is_hidden: bool = False

    def __post_init__(self):
        if self.suit == JOKER_SUIT:
            if self.rank != JOKER_RANK:
                raise ValueError(f"Joker must have rank {JOKER_RANK}, got {self.rank}")
        elif self.suit not in ALL_SUITS:
            raise ValueError(f"Invalid suit '{self.suit}'")
        elif self.rank not in ALL_RANKS:
            raise ValueError(f"Invalid rank '{self.rank}' for suit '{self.suit}'")
        if not self.id:
            # Frozen dataclass: bypass __setattr__ to fill the derived id
            object.__setattr__(self, "id", f"{self.suit}-{self.rank}")

    @property
    def is_joker(self) -> bool:
        return self.suit == JOKER_SUIT

    def with_hidden(self, is_hidden: bool) -> "Card":
        """Returns a copy carrying the given face-down flag and the same id."""
        return replace(self, is_hidden=is_hidden)

    def __str__(self) -> str:
        return f"{RANK_TO_STR[self.rank]}{SUIT_TO_STR[self.suit]}"

    def __repr__(self) -> str:
        hidden = ", hidden" if self.is_hidden else ""
        return f"Card({self}{hidden})"


# --- Standard Deck Creation ---
def create_standard_deck() -> List[Card]:
    """Creates the 52 canonical cards, suit-major, in a fixed order."""
    return [Card(suit, rank) for suit in ALL_SUITS for rank in ALL_RANKS]


def parse_card(text: str) -> Card:
    """Parses a short card string such as 'AS', '10h' or 'Td'."""
    text = text.strip().upper()
    if len(text) < 2:
        raise ValueError(f"Invalid card string: '{text}'")
    rank_str, suit_str = text[:-1], text[-1]
    if rank_str not in _STR_TO_RANK or suit_str not in _STR_TO_SUIT:
        raise ValueError(f"Invalid card string: '{text}'")
    return Card(_STR_TO_SUIT[suit_str], _STR_TO_RANK[rank_str])


def parse_cards(text: str) -> List[Card]:
    """Parses a whitespace or comma separated list of card strings."""
    return [parse_card(token) for token in text.replace(",", " ").split()]
