"""
tests/conftest.py

Shared fixtures for all tests.
"""

import random
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

# Ensure project root is on sys.path
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from xypoker.card import parse_cards  # noqa: E402
from xypoker.config import RulesConfig  # noqa: E402
from xypoker.constants import PLAYER_IDS, Phase, ActionStartGame  # noqa: E402
from xypoker.game.engine import GameState, game_reducer, initial_game_state  # noqa: E402
from xypoker.game.player_state import PlayerState  # noqa: E402


def _board_from_rows(rows: Sequence[str]) -> List[list]:
    """Three row strings of five cards each, top row first."""
    board = []
    for row in rows:
        cards = parse_cards(row)
        assert len(cards) == 5, f"Row needs 5 cards: {row}"
        board.append(list(cards))
    return board


@pytest.fixture
def make_board():
    return _board_from_rows


@pytest.fixture
def scoring_state():
    """Factory for a state in the scoring phase with two fully built boards."""

    def _build(
        p1_rows: Sequence[str],
        p2_rows: Sequence[str],
        dice: Sequence[int] = (6, 5, 4, 3, 2),
        house_rules: Optional[RulesConfig] = None,
    ) -> GameState:
        players = [
            PlayerState(id=PLAYER_IDS[0], board=_board_from_rows(p1_rows), dice=list(dice)),
            PlayerState(id=PLAYER_IDS[1], board=_board_from_rows(p2_rows), dice=list(dice)),
        ]
        return GameState(
            players=players,
            current_player_index=0,
            phase=Phase.SCORING,
            deck=[],
            turn_count=31,
            house_rules=house_rules or RulesConfig(),
        )

    return _build


@pytest.fixture
def started_state() -> GameState:
    return game_reducer(initial_game_state(), ActionStartGame(seed=42))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def with_player(state: GameState, index: int, **changes) -> GameState:
    """Returns `state` with one player's fields replaced."""
    players = list(state.players)
    players[index] = replace(players[index], **changes)
    return replace(state, players=players)


@pytest.fixture
def set_player():
    return with_player
