"""
xypoker/exceptions.py
Custom exceptions for the XY Poker engine.
"""


class InsufficientCards(RuntimeError):
    """Raised when a draw asks for more cards than the deck holds.

    The fixed card-count arithmetic of the game makes this unreachable in
    normal play, so it signals a broken invariant rather than a user error.
    """
