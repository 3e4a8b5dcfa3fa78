"""Rules-engine boundary (python-chess)."""

from movetree.core.chess.errors import (
    GameStateError,
    IllegalMoveError,
    InvalidPositionError,
    NotationError,
)
from movetree.core.chess.state import (
    ChessGameState,
    GameState,
    MoveDetail,
    Side,
    transient_state,
)

__all__ = [
    "ChessGameState",
    "GameState",
    "GameStateError",
    "IllegalMoveError",
    "InvalidPositionError",
    "MoveDetail",
    "NotationError",
    "Side",
    "transient_state",
]
