"""
xypoker/scoring.py

Turns evaluated hands into points.

Columns: the better Y-hand takes that column's die value; a full tie pays nobody.
Bottom row: each X-hand earns a fixed base score, plus a flat +1 for the better
kickers when both players made the same kind of hand. A royal flush is not
scored at all: it wins the game outright.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from .constants import NUM_COLS, BOTTOM_ROW, PLAYER_IDS, DRAW_RESULT, XHandType
from .evaluation import (
    HandResult,
    XHandResult,
    YHandResult,
    evaluate_x_hand,
    evaluate_y_hand,
)
from .game.helpers import column_cards

if TYPE_CHECKING:
    from .game.engine import GameState

logger = logging.getLogger(__name__)

INSTANT_WIN = 1000
"""Sentinel base score for a royal flush. Never added to a running score."""

X_HAND_BASE_SCORE: Dict[XHandType, int] = {
    XHandType.ROYAL_FLUSH: INSTANT_WIN,
    XHandType.STRAIGHT_FLUSH: 16,
    XHandType.FOUR_OF_A_KIND: 14,
    XHandType.FULL_HOUSE: 12,
    XHandType.STRAIGHT: 10,
    XHandType.FLUSH: 8,
    XHandType.THREE_OF_A_KIND: 6,
    XHandType.TWO_PAIR: 4,
    XHandType.ONE_PAIR: 2,
    XHandType.HIGH_CARD: 0,
}


def get_x_hand_base_score(hand_type: XHandType) -> int:
    return X_HAND_BASE_SCORE.get(hand_type, 0)


def better_hand(a: HandResult, b: HandResult) -> Optional[int]:
    """Returns 0 if `a` wins, 1 if `b` wins, None on a complete tie."""
    outcome = a.compare(b)
    if outcome > 0:
        return 0
    if outcome < 0:
        return 1
    return None


def compare_y_hands(a: YHandResult, b: YHandResult) -> Optional[int]:
    """Which of two column hands takes the die (0, 1, or None for nobody)."""
    return better_hand(a, b)


def calculate_x_hand_scores(a: XHandResult, b: XHandResult) -> Tuple[int, int]:
    """Base score for each bottom row plus the same-category kicker bonus."""
    score_a = get_x_hand_base_score(a.hand_type)
    score_b = get_x_hand_base_score(b.hand_type)

    # +1 only between hands of the same kind
    if a.rank_value == b.rank_value:
        winner = better_hand(a, b)
        if winner == 0:
            score_a += 1
        elif winner == 1:
            score_b += 1

    return score_a, score_b


@dataclass(frozen=True)
class ColumnResult:
    col_index: int
    die_value: int
    hands: Tuple[YHandResult, YHandResult]
    winner: Optional[int]  # Player index, None when tied

    @property
    def points(self) -> Tuple[int, int]:
        if self.winner is None:
            return 0, 0
        return (self.die_value, 0) if self.winner == 0 else (0, self.die_value)


@dataclass(frozen=True)
class RowResult:
    hands: Tuple[XHandResult, XHandResult]
    points: Tuple[int, int]
    winner: Optional[int]


@dataclass(frozen=True)
class ScoreBreakdown:
    """Everything a result screen needs to explain the final score."""

    columns: List[ColumnResult]
    bottom_row: RowResult
    column_points: Tuple[int, int]
    totals: Tuple[int, int]
    instant_win: bool
    winner: str  # 'p1', 'p2' or 'draw'


def score_breakdown(state: "GameState") -> ScoreBreakdown:
    """Scores two full boards without touching the state.

    Totals start from each player's current score. On a royal flush the column
    points are still reported in the totals but the bottom row adds nothing.
    """
    p1, p2 = state.players
    dice = p1.dice
    pure_tier = state.house_rules.pure_straight_flush_tier

    columns: List[ColumnResult] = []
    col_p1, col_p2 = 0, 0
    for col in range(NUM_COLS):
        cards_p1 = column_cards(p1.board, col)
        cards_p2 = column_cards(p2.board, col)
        if len(cards_p1) != 3 or len(cards_p2) != 3:
            raise ValueError(f"Column {col} is not full on both boards")
        hand_p1 = evaluate_y_hand(cards_p1, dice[col], pure_straight_flush=pure_tier)
        hand_p2 = evaluate_y_hand(cards_p2, dice[col], pure_straight_flush=pure_tier)
        column = ColumnResult(
            col_index=col,
            die_value=dice[col],
            hands=(hand_p1, hand_p2),
            winner=compare_y_hands(hand_p1, hand_p2),
        )
        gained_p1, gained_p2 = column.points
        col_p1 += gained_p1
        col_p2 += gained_p2
        columns.append(column)

    x_p1 = evaluate_x_hand(p1.board[BOTTOM_ROW])
    x_p2 = evaluate_x_hand(p2.board[BOTTOM_ROW])
    totals = (p1.score + col_p1, p2.score + col_p2)

    royal_p1 = x_p1.hand_type == XHandType.ROYAL_FLUSH
    royal_p2 = x_p2.hand_type == XHandType.ROYAL_FLUSH
    if royal_p1 or royal_p2:
        # p1 is checked first, so a double royal goes to p1
        row_winner = 0 if royal_p1 else 1
        winner = PLAYER_IDS[row_winner]
        logger.info("Royal flush on the bottom row: %s wins outright.", winner)
        return ScoreBreakdown(
            columns=columns,
            bottom_row=RowResult(hands=(x_p1, x_p2), points=(0, 0), winner=row_winner),
            column_points=(col_p1, col_p2),
            totals=totals,
            instant_win=True,
            winner=winner,
        )

    x_points = calculate_x_hand_scores(x_p1, x_p2)
    totals = (totals[0] + x_points[0], totals[1] + x_points[1])
    if totals[0] > totals[1]:
        winner = PLAYER_IDS[0]
    elif totals[1] > totals[0]:
        winner = PLAYER_IDS[1]
    else:
        winner = DRAW_RESULT

    return ScoreBreakdown(
        columns=columns,
        bottom_row=RowResult(
            hands=(x_p1, x_p2), points=x_points, winner=better_hand(x_p1, x_p2)
        ),
        column_points=(col_p1, col_p2),
        totals=totals,
        instant_win=False,
        winner=winner,
    )
