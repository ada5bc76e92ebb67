"""xypoker/deck.py - deck building, shuffling, dealing and dice."""

import random
import logging
from typing import List, Optional, Sequence, Tuple

from .card import Card, create_standard_deck
from .constants import NUM_DICE, DIE_FACES
from .exceptions import InsufficientCards

logger = logging.getLogger(__name__)


def new_deck() -> List[Card]:
    """Returns the 52 canonical cards, unshuffled."""
    return create_standard_deck()


def shuffle(deck: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Fisher-Yates shuffle into a new list; the input is left untouched."""
    rng = rng or random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def draw(deck: Sequence[Card], n: int) -> Tuple[List[Card], List[Card]]:
    """Takes the first n cards. Returns (drawn, remaining)."""
    if n < 0:
        raise ValueError(f"Cannot draw a negative number of cards ({n})")
    if n > len(deck):
        logger.critical("Deck underflow: requested %d cards, %d remain.", n, len(deck))
        raise InsufficientCards(f"Requested {n} cards but only {len(deck)} remain")
    return list(deck[:n]), list(deck[n:])


def roll_dice(rng: Optional[random.Random] = None, count: int = NUM_DICE) -> List[int]:
    """Rolls `count` independent dice."""
    rng = rng or random.Random()
    return [rng.randint(1, DIE_FACES) for _ in range(count)]
