"""
xypoker/constants.py

Defines core constants, enumerations, and action types for the XY Poker engine.

Includes card ranks/suits, board geometry, hand-type enumerations, game phases,
and structured definitions for every action the reducer accepts.
"""

import enum
from typing import NamedTuple, Optional, Union, TYPE_CHECKING

# Use TYPE_CHECKING to allow importing GameState only for type hints
if TYPE_CHECKING:
    from .game.engine import GameState


# Card Suits
HEARTS = "hearts"
DIAMONDS = "diamonds"
CLUBS = "clubs"
SPADES = "spades"
ALL_SUITS = [HEARTS, DIAMONDS, CLUBS, SPADES]

"""Jokers are typed but never dealt."""
JOKER_SUIT = "joker"
JOKER_RANK = 15

# Card Ranks (integer representation, ace high)
JACK = 11
QUEEN = 12
KING = 13
ACE = 14
ALL_RANKS = list(range(2, ACE + 1))

RANK_TO_STR = {
    **{r: str(r) for r in range(2, 11)},
    JACK: "J",
    QUEEN: "Q",
    KING: "K",
    ACE: "A",
    JOKER_RANK: "R",
}
SUIT_TO_STR = {HEARTS: "H", DIAMONDS: "D", CLUBS: "C", SPADES: "S", JOKER_SUIT: ""}


# --- Game Constants ---
NUM_PLAYERS = 2
PLAYER_IDS = ("p1", "p2")
DRAW_RESULT = "draw"

NUM_ROWS = 3
NUM_COLS = 5
BOTTOM_ROW = NUM_ROWS - 1

NUM_DICE = NUM_COLS
DIE_FACES = 6

INITIAL_HAND_SIZE = 4
"""Initial number of cards dealt to each player."""

MAX_HIDDEN_CARDS = 3
"""Maximum face-down cards on one player's board."""

MAX_HIDDEN_PER_COLUMN = 2
"""A column may never be entirely face-down."""


class Phase(enum.Enum):
    """Lifecycle of a game. Transitions only move forward until a reset."""

    SETUP = "setup"
    PLAYING = "playing"
    SCORING = "scoring"
    ENDED = "ended"


class YHandType(enum.Enum):
    """3-card column hands. Values are the rank_value used for ordering."""

    PURE_STRAIGHT_FLUSH = 9  # Only produced when the optional tier is enabled
    THREE_OF_A_KIND = 8
    STRAIGHT_FLUSH = 7
    PURE_STRAIGHT = 6
    FLUSH = 5
    PURE_ONE_PAIR = 4
    STRAIGHT = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


class XHandType(enum.Enum):
    """5-card bottom-row hands, standard poker order."""

    ROYAL_FLUSH = 10
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


# --- Structured Action Definitions ---
# Using NamedTuple for clarity, hashability, and type checking


class ActionStartGame(NamedTuple):
    """Action: Reset and deal a fresh game. Valid from any phase."""

    seed: Optional[int] = None  # Seeds the game RNG when no rng is passed in


class ActionPlaceAndDraw(NamedTuple):
    """Action: Place a card from hand into a column, then draw."""

    card_id: str
    col_index: int
    is_hidden: bool = False


class ActionCalculateScore(NamedTuple):
    """Action: Score a finished board and declare the winner."""


class ActionSyncState(NamedTuple):
    """Action: Replace the whole state with an authoritative snapshot."""

    state: "GameState"


# Union type for all possible actions
GameAction = Union[
    ActionStartGame,
    ActionPlaceAndDraw,
    ActionCalculateScore,
    ActionSyncState,
]
"""A type alias representing any action the reducer understands."""
