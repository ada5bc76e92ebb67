"""
xypoker/game/serialization.py

Lossless conversion between GameState and plain dicts / JSON, used for
SyncState snapshots and by replication or persistence collaborators.
Card identity, hidden flags, dice, scores, turn count, phase, winner and house
rules all survive a round trip. Malformed input raises KeyError or ValueError.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from .engine import GameState
from .player_state import PlayerState
from ..card import Card
from ..config import RulesConfig
from ..constants import Phase

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def card_to_dict(card: Optional[Card]) -> Optional[Dict[str, Any]]:
    if card is None:
        return None
    return {"suit": card.suit, "rank": card.rank, "id": card.id, "is_hidden": card.is_hidden}


def card_from_dict(data: Optional[Dict[str, Any]]) -> Optional[Card]:
    if data is None:
        return None
    return Card(
        suit=data["suit"],
        rank=int(data["rank"]),
        id=data["id"],
        is_hidden=bool(data.get("is_hidden", False)),
    )


def _cards_from_list(items: List[Dict[str, Any]]) -> List[Card]:
    return [card_from_dict(item) for item in items]


def player_to_dict(player: PlayerState) -> Dict[str, Any]:
    return {
        "id": player.id,
        "hand": [card_to_dict(card) for card in player.hand],
        "board": [[card_to_dict(card) for card in row] for row in player.board],
        "dice": list(player.dice),
        "score": player.score,
        "hidden_cards_count": player.hidden_cards_count,
        "bonuses_claimed": player.bonuses_claimed,
    }


def player_from_dict(data: Dict[str, Any]) -> PlayerState:
    return PlayerState(
        id=data["id"],
        hand=_cards_from_list(data["hand"]),
        board=[[card_from_dict(cell) for cell in row] for row in data["board"]],
        dice=[int(value) for value in data["dice"]],
        score=int(data["score"]),
        hidden_cards_count=int(data["hidden_cards_count"]),
        bonuses_claimed=int(data["bonuses_claimed"]),
    )


def state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "players": [player_to_dict(player) for player in state.players],
        "current_player_index": state.current_player_index,
        "phase": state.phase.value,
        "deck": [card_to_dict(card) for card in state.deck],
        "turn_count": state.turn_count,
        "winner": state.winner,
        "house_rules": state.house_rules.to_dict(),
    }


def state_from_dict(data: Dict[str, Any]) -> GameState:
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version {version}")
    return GameState(
        players=[player_from_dict(item) for item in data["players"]],
        current_player_index=int(data["current_player_index"]),
        phase=Phase(data["phase"]),
        deck=_cards_from_list(data["deck"]),
        turn_count=int(data["turn_count"]),
        winner=data["winner"],
        house_rules=RulesConfig.from_dict(data.get("house_rules")),
    )


def dumps(state: GameState) -> str:
    return json.dumps(state_to_dict(state))


def loads(text: str) -> GameState:
    return state_from_dict(json.loads(text))
