"""
xypoker/evaluation.py

Hand evaluators for the two kinds of hands on an XY Poker board:

- Y-hands: the 3 cards of a column, read top to bottom. Position matters, since
  a straight laid out in order ("pure") outranks the same ranks shuffled, and an
  adjacent pair outranks a split one.
- X-hands: the 5 cards of the bottom row, ranked as standard poker.

Both evaluators are pure and deterministic, and always see the true rank and
suit of face-down cards.
"""

import itertools
import logging
from collections import Counter
from dataclasses import dataclass
from functools import total_ordering
from typing import Sequence, Tuple

from .card import Card
from .constants import ACE, YHandType, XHandType

logger = logging.getLogger(__name__)

WHEEL_Y = (2, 3, ACE)
WHEEL_X = (2, 3, 4, 5, ACE)


def compare_kickers(a: Sequence[int], b: Sequence[int]) -> int:
    """Element-wise comparison; the first strict difference decides.

    Missing positions count as 0. Returns 1, -1 or 0.
    """
    for ka, kb in itertools.zip_longest(a, b, fillvalue=0):
        if ka != kb:
            return 1 if ka > kb else -1
    return 0


@total_ordering
@dataclass(frozen=True)
class HandResult:
    """Common ordering for Y and X results: rank_value first, then kickers."""

    rank_value: int
    kickers: Tuple[int, ...]

    def compare(self, other: "HandResult") -> int:
        if self.rank_value != other.rank_value:
            return 1 if self.rank_value > other.rank_value else -1
        return compare_kickers(self.kickers, other.kickers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HandResult):
            return NotImplemented
        return self.compare(other) < 0


@dataclass(frozen=True, eq=False)
class YHandResult(HandResult):
    hand_type: YHandType = YHandType.HIGH_CARD
    die_value: int = 0

    def __repr__(self) -> str:
        return f"{self.hand_type.name}{list(self.kickers)} (die {self.die_value})"


@dataclass(frozen=True, eq=False)
class XHandResult(HandResult):
    hand_type: XHandType = XHandType.HIGH_CARD

    def __repr__(self) -> str:
        return f"{self.hand_type.name}{list(self.kickers)}"


def _check_no_jokers(cards: Sequence[Card]):
    if any(card.is_joker for card in cards):
        raise ValueError("Jokers are not dealt in XY Poker and cannot be evaluated")


# --- Y Hand Evaluation (3 Cards) ---


def evaluate_y_hand(
    cards: Sequence[Card], die_value: int, pure_straight_flush: bool = False
) -> YHandResult:
    """Evaluates a column, given in row order (top, middle, bottom).

    The die only matters as the points at stake; it never affects ranking.
    With `pure_straight_flush` enabled, a suited straight laid out in order is
    promoted to its own top tier instead of counting as a plain straight flush.
    """
    if len(cards) != 3:
        raise ValueError(f"A Y-hand needs exactly 3 cards, got {len(cards)}")
    _check_no_jokers(cards)

    ranks = [card.rank for card in cards]
    sorted_ranks = sorted(ranks)
    desc_ranks = tuple(sorted_ranks[::-1])
    rank_counter = Counter(ranks)

    is_flush = len({card.suit for card in cards}) == 1
    is_trips = len(rank_counter) == 1

    is_straight = False
    straight_high = sorted_ranks[2]
    if len(rank_counter) == 3:
        if sorted_ranks[0] + 2 == sorted_ranks[2]:
            is_straight = True
        elif tuple(sorted_ranks) == WHEEL_Y:
            # A-2-3 is the weakest straight, 3 high
            is_straight = True
            straight_high = 3

    is_ordered = False
    if is_straight:
        is_asc = ranks[0] + 1 == ranks[1] and ranks[1] + 1 == ranks[2]
        is_desc = ranks[0] - 1 == ranks[1] and ranks[1] - 1 == ranks[2]
        is_wheel_ordered = ranks in ([ACE, 2, 3], [3, 2, ACE])
        is_ordered = is_asc or is_desc or is_wheel_ordered

    pair_01 = ranks[0] == ranks[1]
    pair_12 = ranks[1] == ranks[2]
    is_pair = len(rank_counter) == 2

    def result(hand_type: YHandType, kickers: Sequence[int]) -> YHandResult:
        return YHandResult(
            rank_value=hand_type.value,
            kickers=tuple(kickers),
            hand_type=hand_type,
            die_value=die_value,
        )

    if is_trips:
        return result(YHandType.THREE_OF_A_KIND, [ranks[0]])

    if is_flush and is_straight:
        if pure_straight_flush and is_ordered:
            return result(YHandType.PURE_STRAIGHT_FLUSH, [straight_high])
        return result(YHandType.STRAIGHT_FLUSH, [straight_high])

    if is_straight and is_ordered:
        return result(YHandType.PURE_STRAIGHT, [straight_high])

    if is_flush:
        return result(YHandType.FLUSH, desc_ranks)

    if is_pair and (pair_01 or pair_12):
        pair_rank = ranks[1]  # The middle card belongs to any adjacent pair
        kicker = ranks[2] if pair_01 else ranks[0]
        return result(YHandType.PURE_ONE_PAIR, [pair_rank, kicker])

    if is_straight:
        return result(YHandType.STRAIGHT, [straight_high])

    if is_pair:
        # Split pair: positions 0 and 2
        return result(YHandType.ONE_PAIR, [ranks[0], ranks[1]])

    return result(YHandType.HIGH_CARD, desc_ranks)


# --- X Hand Evaluation (5 Cards) ---


def evaluate_x_hand(cards: Sequence[Card]) -> XHandResult:
    """Evaluates a bottom row as a standard 5-card poker hand."""
    if len(cards) != 5:
        raise ValueError(f"An X-hand needs exactly 5 cards, got {len(cards)}")
    _check_no_jokers(cards)

    sorted_ranks = sorted(card.rank for card in cards)
    desc_ranks = tuple(sorted_ranks[::-1])
    rank_counter = Counter(sorted_ranks)
    # Most common first, higher rank first among equal counts
    groups = sorted(rank_counter.items(), key=lambda item: (item[1], item[0]), reverse=True)
    counts = [count for _, count in groups]

    is_flush = len({card.suit for card in cards}) == 1

    is_straight = False
    straight_high = sorted_ranks[4]
    if len(rank_counter) == 5:
        if sorted_ranks[0] + 4 == sorted_ranks[4]:
            is_straight = True
        elif tuple(sorted_ranks) == WHEEL_X:
            # Special case for the ace to five straight
            is_straight = True
            straight_high = 5

    def result(hand_type: XHandType, kickers: Sequence[int]) -> XHandResult:
        return XHandResult(
            rank_value=hand_type.value, kickers=tuple(kickers), hand_type=hand_type
        )

    if is_flush and is_straight:
        if straight_high == ACE:
            return result(XHandType.ROYAL_FLUSH, [])
        return result(XHandType.STRAIGHT_FLUSH, [straight_high])

    if counts[0] == 4:
        return result(XHandType.FOUR_OF_A_KIND, [groups[0][0], groups[1][0]])

    if counts[:2] == [3, 2]:
        return result(XHandType.FULL_HOUSE, [groups[0][0], groups[1][0]])

    if is_flush:
        return result(XHandType.FLUSH, desc_ranks)

    if is_straight:
        return result(XHandType.STRAIGHT, [straight_high])

    if counts[0] == 3:
        others = [rank for rank in desc_ranks if rank != groups[0][0]]
        return result(XHandType.THREE_OF_A_KIND, [groups[0][0], *others])

    if counts[:2] == [2, 2]:
        # groups is already ordered high pair, low pair, kicker
        return result(XHandType.TWO_PAIR, [rank for rank, _ in groups])

    if counts[0] == 2:
        others = [rank for rank in desc_ranks if rank != groups[0][0]]
        return result(XHandType.ONE_PAIR, [groups[0][0], *others])

    return result(XHandType.HIGH_CARD, desc_ranks)
