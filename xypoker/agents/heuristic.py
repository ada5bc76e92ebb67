"""
xypoker/agents/heuristic.py

Weighted heuristic move selection for the computer opponent.

Every (card in hand, open column) pair is scored by simulating the placement.
The score mixes the strength of the partial column, a rush bonus for finishing
a column before the opponent, the bottom row's X-hand potential and a small
opponent-blocking term, all scaled by the learned WeightVector. A random
jitter breaks ties. The hide decision is taken afterwards for the chosen move.
"""

import logging
import random
from collections import Counter
from typing import NamedTuple, Optional, Sequence, TYPE_CHECKING

from ..card import Card
from ..constants import ACE, BOTTOM_ROW, QUEEN
from ..game.helpers import column_cards, first_empty_row, is_column_full
from ..learning import WeightVector

if TYPE_CHECKING:
    from ..game.engine import GameState

logger = logging.getLogger(__name__)

DICE_MIDPOINT = 3.5
REGIME_BOOST = 1.2

FRESH_COLUMN_BONUS = 40.0
LOW_DIE_THRESHOLD = 2
LOW_DIE_SCALE = 0.7
RUSH_BONUS = 150.0
LOW_DIE_RUSH_BONUS = 100.0
HIGH_X_CARD_BONUS = 15.0

EARLY_GAME_HIDE_BOOST = 1.5


class Move(NamedTuple):
    card_id: str
    col_index: int
    is_hidden: bool = False


def dice_regime(dice: Sequence[int]) -> tuple:
    """(y_weight, x_weight) for this deal. High dice favour the columns."""
    if not dice:
        return 1.0, 1.0
    mean = sum(dice) / len(dice)
    if mean > DICE_MIDPOINT:
        return REGIME_BOOST, 1.0
    return 1.0, REGIME_BOOST


# --- Partial hand heuristics ---


def _is_run(ranks: Sequence[int]) -> bool:
    """Distinct ranks that can still belong to one straight of len(ranks)+."""
    if len(set(ranks)) != len(ranks):
        return False
    span = max(ranks) - min(ranks)
    if span <= len(ranks) - 1:
        return True
    low_ace = [1 if rank == ACE else rank for rank in ranks]
    return max(low_ace) - min(low_ace) <= len(ranks) - 1


def _is_ordered(ranks: Sequence[int]) -> bool:
    steps = [b - a for a, b in zip(ranks, ranks[1:])]
    return all(step == 1 for step in steps) or all(step == -1 for step in steps)


def y_heuristic(cards: Sequence[Card], die_value: int, weights: WeightVector) -> float:
    """Score of a partial column (1 to 3 cards, top to bottom)."""
    ranks = [card.rank for card in cards]
    score = 0.0

    most_common = Counter(ranks).most_common(1)[0][1]
    if most_common == 3:
        score += 100.0 * weights.trip_preference
    elif most_common == 2:
        # Open pair above a closed one
        score += (50.0 if len(cards) == 2 else 30.0) * weights.trip_preference

    if len(cards) > 1 and len({card.suit for card in cards}) == 1:
        score += 30.0 * (len(cards) - 1) * weights.flush_preference

    if len(cards) > 1 and _is_run(ranks):
        run_score = 25.0 if len(cards) == 2 else 80.0
        if _is_ordered(ranks):
            run_score += 20.0
        score += run_score * weights.straight_preference

    # High cards, scaled by the die
    score += sum(die_value * 2.0 for rank in ranks if rank >= 10)
    return score


def x_potential(row_cards: Sequence[Card], card: Card) -> float:
    """How much `card` adds to the bottom row built so far."""
    score = 0.0
    matches = sum(1 for other in row_cards if other.rank == card.rank)
    if matches == 1:
        score += 20.0
    elif matches == 2:
        score += 45.0
    elif matches >= 3:
        score += 70.0

    combined = list(row_cards) + [card]
    if len(combined) >= 2 and len({c.suit for c in combined}) == 1:
        score += 10.0 * len(combined)
    if len(combined) >= 2 and _is_run([c.rank for c in combined]):
        score += 8.0 * len(combined)

    if card.rank >= QUEEN:
        score += HIGH_X_CARD_BONUS
    return score


def block_bonus(opponent_cards: Sequence[Card]) -> float:
    """Reward for contesting a column where the opponent shows something."""
    visible = [card for card in opponent_cards if not card.is_hidden]
    if len(visible) < 2:
        return 0.0
    score = 0.0
    most_common = Counter(card.rank for card in visible).most_common(1)[0][1]
    if most_common >= 3:
        score += 40.0
    elif most_common == 2:
        score += 25.0
    if len({card.suit for card in visible}) == 1:
        score += 15.0
    return score


def score_placement(
    state: "GameState",
    player_index: int,
    card: Card,
    col: int,
    weights: WeightVector,
    regime: tuple,
) -> float:
    """Deterministic part of a move's score."""
    player = state.players[player_index]
    opponent = state.players[state.get_opponent_index(player_index)]
    target_row = first_empty_row(player.board, col)
    die_value = player.dice[col] if col < len(player.dice) else 0
    y_weight, x_weight = regime

    column = column_cards(player.board, col) + [card]
    score = y_heuristic(column, die_value, weights) * y_weight
    if die_value <= LOW_DIE_THRESHOLD:
        score *= LOW_DIE_SCALE
        rush = LOW_DIE_RUSH_BONUS
    else:
        rush = RUSH_BONUS

    if target_row == 0:
        score += FRESH_COLUMN_BONUS

    completes_first = target_row == BOTTOM_ROW and not is_column_full(opponent.board, col)
    if completes_first:
        score += rush * weights.bonus_aggression

    if target_row == BOTTOM_ROW:
        row_cards = [c for c in player.board[BOTTOM_ROW] if c is not None]
        score += x_potential(row_cards, card) * weights.x_hand_focus * x_weight

    score += block_bonus(column_cards(opponent.board, col))
    return score


# --- Hiding ---


def hide_probability(
    card: Card,
    die_value: int,
    turn_count: int,
    weights: WeightVector,
    early_game_turns: int = 8,
) -> float:
    """Chance of placing `card` face-down, before legality is considered."""
    if card.rank >= QUEEN and die_value >= 4:
        base = 1.0
    elif card.rank >= 10 or die_value >= 5:
        base = 0.6
    else:
        base = 0.3
    if turn_count <= early_game_turns:
        base *= EARLY_GAME_HIDE_BOOST
    return min(1.0, base * weights.hiding_strategy)


def should_hide(
    state: "GameState",
    player_index: int,
    card: Card,
    col: int,
    weights: WeightVector,
    rng: random.Random,
    early_game_turns: int = 8,
) -> bool:
    if not state.can_hide(player_index, card, col):
        return False
    dice = state.players[player_index].dice
    die_value = dice[col] if col < len(dice) else 0
    probability = hide_probability(
        card, die_value, state.turn_count, weights, early_game_turns
    )
    return rng.random() < probability


# --- Move selection ---


def best_move(
    state: "GameState",
    player_index: int,
    weights: Optional[WeightVector] = None,
    rng: Optional[random.Random] = None,
    jitter: float = 10.0,
    early_game_turns: int = 8,
) -> Move:
    """Picks the highest scoring placement for `player_index`.

    Raises ValueError when the player has no card or no open column.
    """
    weights = weights or WeightVector()
    rng = rng or random.Random()
    player = state.players[player_index]
    columns = state.legal_columns(player_index)
    if not player.hand or not columns:
        raise ValueError(f"P{player_index} has no legal move.")

    regime = dice_regime(player.dice)
    best_card: Optional[Card] = None
    best_col = -1
    best_score = float("-inf")
    for card in player.hand:
        for col in columns:
            score = score_placement(state, player_index, card, col, weights, regime)
            score += rng.random() * jitter
            if score > best_score:
                best_score = score
                best_card = card
                best_col = col

    is_hidden = should_hide(
        state, player_index, best_card, best_col, weights, rng, early_game_turns
    )
    move = Move(best_card.id, best_col, is_hidden)
    logger.debug("P%d heuristic move %s (score %.1f)", player_index, move, best_score)
    return move


def random_move(
    state: "GameState", player_index: int, rng: Optional[random.Random] = None
) -> Move:
    """A random legal face-up placement, as played when a turn clock runs out."""
    rng = rng or random.Random()
    player = state.players[player_index]
    columns = state.legal_columns(player_index)
    if not player.hand or not columns:
        raise ValueError(f"P{player_index} has no legal move.")
    card = rng.choice(player.hand)
    return Move(card.id, rng.choice(columns), False)
