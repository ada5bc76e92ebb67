"""
xypoker/learning.py

Adaptive weight store for the heuristic AI.

A handful of multiplicative strategy weights drift after each finished
single-player game: a win reinforces every preference a little, a loss shifts
emphasis from the strongest preference to the weakest and makes the AI chase
column bonuses harder. Storage is an injected port, so the engine itself never
touches a file or any global state.
"""

import logging
from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, Optional, Protocol, Tuple, TYPE_CHECKING

from .constants import DRAW_RESULT, PLAYER_IDS
from .persistence import load_learning_data, save_learning_data

if TYPE_CHECKING:
    from .game.engine import GameState

logger = logging.getLogger(__name__)

PREFERENCE_NAMES: Tuple[str, ...] = (
    "trip_preference",
    "flush_preference",
    "straight_preference",
    "x_hand_focus",
    "bonus_aggression",
)

WEIGHT_BOUNDS: Dict[str, Tuple[float, float]] = {
    "trip_preference": (0.5, 2.0),
    "flush_preference": (0.5, 2.0),
    "straight_preference": (0.5, 2.0),
    "x_hand_focus": (0.5, 2.0),
    "bonus_aggression": (0.5, 2.5),
    "hiding_strategy": (0.1, 0.6),
}

WIN_REINFORCEMENT = 1.05
LOSS_BOOST_WEAKEST = 1.10
LOSS_DAMPEN_STRONGEST = 0.95
LOSS_AGGRESSION = 1.08


@dataclass(frozen=True)
class WeightVector:
    trip_preference: float = 1.0
    flush_preference: float = 1.0
    straight_preference: float = 1.0
    x_hand_focus: float = 1.0
    bonus_aggression: float = 1.0
    hiding_strategy: float = 0.3

    def clamped(self) -> "WeightVector":
        values = {}
        for name, (low, high) in WEIGHT_BOUNDS.items():
            values[name] = min(max(getattr(self, name), low), high)
        return WeightVector(**values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeightVector":
        defaults = cls()
        return cls(
            **{
                f.name: float(data.get(f.name, getattr(defaults, f.name)))
                for f in fields(cls)
            }
        )


@dataclass
class LearningData:
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    weights: WeightVector = field(default_factory=WeightVector)

    def to_dict(self) -> Dict[str, Any]:
        # Flat record, one key per counter and per weight
        return {
            "total_games": self.total_games,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
            **self.weights.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LearningData":
        if not data:
            return cls()
        return cls(
            total_games=int(data.get("total_games", 0)),
            wins=int(data.get("wins", 0)),
            losses=int(data.get("losses", 0)),
            draws=int(data.get("draws", 0)),
            weights=WeightVector.from_dict(data),
        )


def update_weights(weights: WeightVector, won: bool, draw: bool = False) -> WeightVector:
    """The learning rule, as a pure function of the previous weights."""
    values = weights.to_dict()
    if draw:
        return weights.clamped()

    if won:
        for name in PREFERENCE_NAMES:
            values[name] *= WIN_REINFORCEMENT
    else:
        # Ties resolve to the first minimum and the last maximum
        weakest = min(PREFERENCE_NAMES, key=lambda name: values[name])
        strongest = max(reversed(PREFERENCE_NAMES), key=lambda name: values[name])
        values[weakest] *= LOSS_BOOST_WEAKEST
        values[strongest] *= LOSS_DAMPEN_STRONGEST
        values["bonus_aggression"] *= LOSS_AGGRESSION

    return WeightVector(**values).clamped()


# --- Persistence ports ---


class WeightPort(Protocol):
    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, data: Dict[str, Any]) -> None: ...


class InMemoryWeightPort:
    """Keeps the record in memory; useful for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data = dict(initial) if initial else None

    def load(self) -> Optional[Dict[str, Any]]:
        return dict(self._data) if self._data is not None else None

    def save(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)


class JoblibWeightPort:
    """Stores the record as a joblib file."""

    def __init__(self, filepath: str):
        self.filepath = filepath

    def load(self) -> Optional[Dict[str, Any]]:
        return load_learning_data(self.filepath)

    def save(self, data: Dict[str, Any]) -> None:
        save_learning_data(data, self.filepath)


class WeightStore:
    """Reads and updates the AI's learning record through a port."""

    def __init__(self, port: WeightPort):
        self.port = port

    def data(self) -> LearningData:
        return LearningData.from_dict(self.port.load())

    def load(self) -> WeightVector:
        return self.data().weights

    def record_result(self, won: bool, draw: bool = False) -> LearningData:
        data = self.data()
        data.total_games += 1
        if draw:
            data.draws += 1
        elif won:
            data.wins += 1
        else:
            data.losses += 1
        data.weights = update_weights(data.weights, won=won, draw=draw)
        self.port.save(data.to_dict())
        logger.info(
            "Recorded AI %s (%d games). Weights now %s",
            "draw" if draw else ("win" if won else "loss"),
            data.total_games,
            data.weights,
        )
        return data

    def win_rate(self) -> float:
        data = self.data()
        if data.total_games == 0:
            return 0.0
        return data.wins / data.total_games

    def stats(self) -> Dict[str, Any]:
        data = self.data()
        return {
            "games": data.total_games,
            "wins": data.wins,
            "losses": data.losses,
            "draws": data.draws,
            "win_rate": data.wins / data.total_games if data.total_games else 0.0,
        }

    def reset(self):
        self.port.save(LearningData().to_dict())
        logger.info("AI learning data reset to defaults.")


def record_game_result(
    store: WeightStore, state: "GameState", ai_player_index: int
) -> Optional[LearningData]:
    """Feeds a finished game into the store from the AI's point of view."""
    if state.winner is None:
        logger.warning("record_game_result called before the game has a winner.")
        return None
    draw = state.winner == DRAW_RESULT
    won = state.winner == PLAYER_IDS[ai_player_index]
    return store.record_result(won=won, draw=draw)
