"""xypoker/game/engine.py"""

import random
from dataclasses import dataclass, field, replace
from typing import List, Optional
import logging

from ._query_mixin import QueryMixin
from .helpers import copy_board, first_empty_row, is_column_full, serialize_card
from .player_state import PlayerState
from ..card import Card
from ..config import RulesConfig
from ..constants import (
    BOTTOM_ROW,
    INITIAL_HAND_SIZE,
    PLAYER_IDS,
    Phase,
    GameAction,
    ActionStartGame,
    ActionPlaceAndDraw,
    ActionCalculateScore,
    ActionSyncState,
)
from ..deck import new_deck, shuffle, draw, roll_dice
from ..scoring import score_breakdown

logger = logging.getLogger(__name__)


def _initial_players() -> List[PlayerState]:
    return [PlayerState(id=player_id) for player_id in PLAYER_IDS]


@dataclass
class GameState(QueryMixin):
    """
    The full, objective state of a 1v1 XY Poker game.

    Instances are treated as values: `game_reducer` never mutates the state it
    is given and always returns a new one, so two peers can each hold their own
    copy and reconcile by swapping snapshots.
    """

    players: List[PlayerState] = field(default_factory=_initial_players)
    current_player_index: int = 0
    phase: Phase = Phase.SETUP
    deck: List[Card] = field(default_factory=list)
    turn_count: int = 0
    winner: Optional[str] = None  # 'p1', 'p2', 'draw'
    house_rules: RulesConfig = field(default_factory=RulesConfig)


def initial_game_state(house_rules: Optional[RulesConfig] = None) -> GameState:
    """The pre-game state shown before the first deal."""
    return GameState(house_rules=house_rules or RulesConfig())


# --- Reducer ---


def game_reducer(
    state: GameState, action: GameAction, rng: Optional[random.Random] = None
) -> GameState:
    """
    Applies one action and returns the resulting state.

    Illegal placements and out-of-phase actions return `state` itself,
    unchanged; unknown action values are ignored the same way.
    """
    if isinstance(action, ActionStartGame):
        return _start_game(state, action, rng)
    if isinstance(action, ActionPlaceAndDraw):
        return _place_and_draw(state, action)
    if isinstance(action, ActionCalculateScore):
        return _calculate_score(state)
    if isinstance(action, ActionSyncState):
        logger.debug("Replacing local state with synced snapshot.")
        return action.state

    logger.debug("Ignoring unknown action %r", action)
    return state


def _start_game(
    state: GameState, action: ActionStartGame, rng: Optional[random.Random]
) -> GameState:
    """Shuffles, deals 4 cards each, rolls the shared dice, picks who starts."""
    rng = rng or random.Random(action.seed)

    deck = shuffle(new_deck(), rng)
    p1_hand, deck = draw(deck, INITIAL_HAND_SIZE)
    p2_hand, deck = draw(deck, INITIAL_HAND_SIZE)

    dice = roll_dice(rng)
    if state.house_rules.sort_dice_descending:
        dice.sort(reverse=True)

    starting_player = rng.randint(0, 1)

    new_state = GameState(
        players=[
            PlayerState(id=PLAYER_IDS[0], hand=p1_hand, dice=list(dice)),
            PlayerState(id=PLAYER_IDS[1], hand=p2_hand, dice=list(dice)),
        ],
        current_player_index=starting_player,
        phase=Phase.PLAYING,
        deck=deck,
        turn_count=1,
        winner=None,
        house_rules=state.house_rules,
    )
    logger.debug(
        "Game setup complete. Dice %s. P%d starts. House Rules: %s",
        dice,
        starting_player,
        state.house_rules,
    )
    return new_state


def _place_and_draw(state: GameState, action: ActionPlaceAndDraw) -> GameState:
    player_idx = state.current_player_index
    rejection = state.placement_rejection(
        player_idx, action.card_id, action.col_index, action.is_hidden
    )
    if rejection is not None:
        logger.debug("Rejected placement %s by P%d: %s", action, player_idx, rejection)
        return state

    player = state.players[player_idx]
    opponent = state.players[state.get_opponent_index(player_idx)]
    col = action.col_index

    hand = list(player.hand)
    card = hand.pop(player.find_in_hand(action.card_id))

    board = copy_board(player.board)
    target_row = first_empty_row(board, col)
    board[target_row][col] = card.with_hidden(action.is_hidden)

    deck = state.deck
    bonuses_claimed = player.bonuses_claimed

    # First to complete a column takes a bonus card; finishing second earns nothing
    if target_row == BOTTOM_ROW and not is_column_full(opponent.board, col):
        bonuses_claimed += 1
        bonus_cards, deck = draw(deck, 1)
        hand.extend(bonus_cards)
        logger.debug("P%d completed column %d first and draws a bonus card.", player_idx, col)

    standard_cards, deck = draw(deck, 1)
    hand.extend(standard_cards)

    players = list(state.players)
    players[player_idx] = replace(
        player,
        hand=hand,
        board=board,
        hidden_cards_count=player.hidden_cards_count + (1 if action.is_hidden else 0),
        bonuses_claimed=bonuses_claimed,
    )

    new_state = replace(
        state,
        players=players,
        deck=deck,
        current_player_index=state.get_opponent_index(player_idx),
        turn_count=state.turn_count + 1,
    )
    logger.debug(
        "Turn %d: P%d placed %s%s at row %d col %d. Deck: %d",
        state.turn_count,
        player_idx,
        serialize_card(card),
        " (hidden)" if action.is_hidden else "",
        target_row,
        col,
        len(deck),
    )

    if new_state.both_boards_full():
        logger.info("Both boards full after turn %d. Moving to scoring.", state.turn_count)
        new_state = replace(new_state, phase=Phase.SCORING)
    return new_state


def _calculate_score(state: GameState) -> GameState:
    if state.phase != Phase.SCORING:
        logger.debug("Ignoring score calculation in phase %s.", state.phase.value)
        return state

    breakdown = score_breakdown(state)
    players = [
        replace(player, score=total)
        for player, total in zip(state.players, breakdown.totals)
    ]
    logger.info(
        "Game over. Scores %d - %d. Winner: %s%s",
        breakdown.totals[0],
        breakdown.totals[1],
        breakdown.winner,
        " (royal flush)" if breakdown.instant_win else "",
    )
    return replace(state, players=players, winner=breakdown.winner, phase=Phase.ENDED)
