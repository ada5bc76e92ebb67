"""Agents that pick placements for simulated and single-player games."""

import random
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

from .heuristic import Move, best_move, random_move
from ..config import Config
from ..game.engine import GameState
from ..learning import WeightStore

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """Abstract base class for XY Poker agents."""

    player_id: int
    opponent_id: int
    config: Config

    def __init__(
        self, player_id: int, config: Config, rng: Optional[random.Random] = None
    ):
        self.player_id = player_id
        self.opponent_id = 1 - player_id
        self.config = config
        self.rng = rng or random.Random()

    @abstractmethod
    def choose_move(self, game_state: GameState) -> Move:
        """Selects a placement for this agent's seat."""
        pass


class RandomAgent(BaseAgent):
    """Plays a random legal face-up placement."""

    def choose_move(self, game_state: GameState) -> Move:
        move = random_move(game_state, self.player_id, self.rng)
        logger.debug("RandomAgent P%d chose move: %s", self.player_id, move)
        return move


class HeuristicAgent(BaseAgent):
    """
    The weighted heuristic opponent.

    Weights are read from the store before every decision, so results recorded
    mid-session take effect on the next move. Without a store the default
    weights are used.
    """

    def __init__(
        self,
        player_id: int,
        config: Config,
        rng: Optional[random.Random] = None,
        weight_store: Optional[WeightStore] = None,
    ):
        super().__init__(player_id, config, rng)
        self.weight_store = weight_store

    def choose_move(self, game_state: GameState) -> Move:
        weights = self.weight_store.load() if self.weight_store else None
        return best_move(
            game_state,
            self.player_id,
            weights=weights,
            rng=self.rng,
            jitter=self.config.ai.jitter,
            early_game_turns=self.config.ai.early_game_turns,
        )


# --- Agent Factory ---

AGENT_REGISTRY: Dict[str, Type[BaseAgent]] = {
    "random": RandomAgent,
    "heuristic": HeuristicAgent,
}


def get_agent(
    agent_type: str,
    player_id: int,
    config: Config,
    rng: Optional[random.Random] = None,
    weight_store: Optional[WeightStore] = None,
) -> BaseAgent:
    """Instantiates an agent based on its type."""
    agent_class = AGENT_REGISTRY.get(agent_type.lower())
    if not agent_class:
        raise ValueError(
            f"Unknown agent type: {agent_type}. Available: {list(AGENT_REGISTRY.keys())}"
        )
    if agent_class is HeuristicAgent:
        return HeuristicAgent(player_id, config, rng=rng, weight_store=weight_store)
    return agent_class(player_id, config, rng=rng)
