"""Errors raised at the rules-engine boundary.

The move tree itself never raises for soft misses (unknown ids, missing
annotations). The exceptions below only surface when python-chess rejects
input that was handed to it: unparseable notation, an illegal move, or a
malformed FEN.
"""


class GameStateError(ValueError):
    """Base exception for rules-engine failures."""

    pass


class NotationError(GameStateError):
    """Raised when game notation cannot be read by the rules engine."""

    pass


class IllegalMoveError(GameStateError):
    """Raised when a move is not legal in the current position."""

    pass


class InvalidPositionError(GameStateError):
    """Raised when a FEN string does not describe a usable position."""

    pass
