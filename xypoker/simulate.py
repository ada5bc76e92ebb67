"""Head-to-head simulation of XY Poker agents."""

import logging
import random
import time
from collections import Counter
from typing import Optional, Sequence

from tqdm import tqdm

from .agents.baseline_agents import BaseAgent, HeuristicAgent, get_agent
from .config import Config, RulesConfig
from .constants import (
    DRAW_RESULT,
    PLAYER_IDS,
    Phase,
    ActionStartGame,
    ActionPlaceAndDraw,
    ActionCalculateScore,
)
from .game.engine import GameState, game_reducer, initial_game_state
from .learning import WeightStore, record_game_result

logger = logging.getLogger(__name__)


def play_game(
    agents: Sequence[BaseAgent],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    house_rules: Optional[RulesConfig] = None,
) -> GameState:
    """Plays one game from the deal to the final score and returns the end state."""
    state = initial_game_state(house_rules)
    state = game_reducer(state, ActionStartGame(seed=seed), rng)

    while state.phase == Phase.PLAYING:
        acting_player = state.current_player_index
        move = agents[acting_player].choose_move(state)
        new_state = game_reducer(
            state, ActionPlaceAndDraw(move.card_id, move.col_index, move.is_hidden)
        )
        if new_state is state:
            raise RuntimeError(
                f"P{acting_player} chose a move the engine rejected: {move}"
            )
        state = new_state

    if state.phase == Phase.SCORING:
        state = game_reducer(state, ActionCalculateScore())
    return state


def _learning_seat(agents: Sequence[BaseAgent], preferred: int) -> Optional[int]:
    if isinstance(agents[preferred], HeuristicAgent):
        return preferred
    for agent in agents:
        if isinstance(agent, HeuristicAgent):
            return agent.player_id
    return None


def run_matches(
    config: Config,
    agent1_type: str,
    agent2_type: str,
    num_games: int,
    seed: Optional[int] = None,
    weight_store: Optional[WeightStore] = None,
    learn: bool = False,
    show_progress: bool = True,
) -> Counter:
    """Runs `num_games` games between two agent types. Keys: 'p1', 'p2', 'draw'."""
    logger.info("--- Starting Simulation ---")
    logger.info("Agent 1 (p1): %s", agent1_type.upper())
    logger.info("Agent 2 (p2): %s", agent2_type.upper())
    logger.info("Number of Games: %d", num_games)

    master_rng = random.Random(seed)
    agents = [
        get_agent(
            agent1_type,
            player_id=0,
            config=config,
            rng=random.Random(master_rng.random()),
            weight_store=weight_store,
        ),
        get_agent(
            agent2_type,
            player_id=1,
            config=config,
            rng=random.Random(master_rng.random()),
            weight_store=weight_store,
        ),
    ]

    ai_seat = None
    if learn:
        if weight_store is None:
            logger.warning("Learning requested without a weight store. Ignoring.")
        else:
            ai_seat = _learning_seat(agents, config.ai.ai_player_index)
            if ai_seat is None:
                logger.warning("Learning requested but no heuristic agent is playing.")

    results: Counter = Counter({PLAYER_IDS[0]: 0, PLAYER_IDS[1]: 0, DRAW_RESULT: 0})
    start_time = time.time()

    for game_num in tqdm(
        range(1, num_games + 1),
        desc="Simulating Games",
        unit="game",
        disable=not show_progress,
    ):
        final_state = play_game(agents, rng=master_rng, house_rules=config.rules)
        results[final_state.winner] += 1
        logger.debug(
            "Game %d: winner %s, scores %s",
            game_num,
            final_state.winner,
            [player.score for player in final_state.players],
        )
        if ai_seat is not None:
            record_game_result(weight_store, final_state, ai_seat)

    total_time = time.time() - start_time
    games_played = sum(results.values())

    logger.info("--- Simulation Results ---")
    logger.info("Games Completed: %d", games_played)
    logger.info("Total Time: %.2f seconds", total_time)
    logger.info(
        "Score: p1 Wins=%d (%.2f%%), p2 Wins=%d (%.2f%%), Draws=%d (%.2f%%)",
        results[PLAYER_IDS[0]],
        (results[PLAYER_IDS[0]] / games_played * 100) if games_played else 0,
        results[PLAYER_IDS[1]],
        (results[PLAYER_IDS[1]] / games_played * 100) if games_played else 0,
        results[DRAW_RESULT],
        (results[DRAW_RESULT] / games_played * 100) if games_played else 0,
    )
    return results
