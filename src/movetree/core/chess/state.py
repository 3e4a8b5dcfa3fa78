"""Rules-engine capability used by the move tree.

The tree never generates or validates moves itself. It talks to a
:class:`GameState`, and :class:`ChessGameState` is the python-chess backed
implementation used everywhere by default.
"""

import io
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import chess
import chess.pgn
from loguru import logger

from movetree.core.chess.errors import IllegalMoveError, InvalidPositionError, NotationError


class Side(Enum):
    """Side that played (or is to play) a move."""

    WHITE = "white"
    BLACK = "black"

    @classmethod
    def from_color(cls, color: chess.Color) -> "Side":
        """Convert a python-chess color to a Side."""
        return cls.WHITE if color == chess.WHITE else cls.BLACK

    @property
    def short(self) -> str:
        """Single-letter tag used in node ids ("w" / "b")."""
        return "w" if self is Side.WHITE else "b"


@dataclass(frozen=True)
class MoveDetail:
    """Structured move as accepted by the rules engine.

    ``san`` may be empty for moves built by a caller from squares only; the
    tree fills it in from the parent position when it creates a node.
    """

    from_square: str
    to_square: str
    promotion: str | None = None
    side: Side | None = None
    san: str = ""

    @classmethod
    def from_uci(cls, uci: str, san: str = "", side: Side | None = None) -> "MoveDetail":
        """Build a MoveDetail from a UCI string such as ``e7e8q``."""
        move = chess.Move.from_uci(uci)
        promotion = chess.piece_symbol(move.promotion) if move.promotion else None
        return cls(
            from_square=chess.square_name(move.from_square),
            to_square=chess.square_name(move.to_square),
            promotion=promotion,
            side=side,
            san=san,
        )

    @property
    def uci(self) -> str:
        """Long algebraic (UCI) form of the move."""
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"

    @property
    def key(self) -> tuple[str, str, str | None]:
        """Identity used to detect duplicate moves under one parent."""
        return (self.from_square, self.to_square, self.promotion)


class GameState(Protocol):
    """Protocol for the rules engine consumed by MoveTree."""

    def load_notation(self, text: str) -> None: ...

    def history_verbose(self) -> list[MoveDetail]: ...

    def reset(self) -> None: ...

    def fen(self) -> str: ...

    def apply_move(self, move: "MoveDetail | chess.Move | str") -> MoveDetail: ...

    def side_to_move(self) -> Side: ...

    def move_number(self) -> int: ...

    def load_position(self, fen: str) -> None: ...


class ChessGameState:
    """python-chess implementation of the :class:`GameState` protocol.

    The state remembers the position it was last loaded at (the start of a
    game read from notation, or a FEN passed to :meth:`load_position`) so
    that :meth:`reset` returns there rather than to the standard opening
    position.
    """

    def __init__(self, fen: str | None = None) -> None:
        """Initialize the state.

        Args:
            fen: Optional starting FEN. Defaults to the standard position.
        """
        self.board = chess.Board()
        self._start_fen = self.board.fen()
        self._moves: list[chess.Move] = []
        if fen is not None:
            self.load_position(fen)

    def load_notation(self, text: str) -> None:
        """Load a game from PGN text and play it through to the end.

        Blank text is an empty game at the standard starting position.

        Args:
            text: PGN text, with or without header tags.

        Raises:
            NotationError: If no game is found or a move cannot be read.
        """
        if not text.strip():
            self.load_position(chess.STARTING_FEN)
            logger.debug("Loaded empty notation")
            return

        game = chess.pgn.read_game(io.StringIO(text))
        if game is None:
            raise NotationError("No game found in notation")
        if game.errors:
            raise NotationError(f"Could not read notation: {game.errors[0]}")

        board = game.board()
        self._start_fen = board.fen()
        self._moves = list(game.mainline_moves())
        for move in self._moves:
            board.push(move)
        self.board = board
        logger.debug(f"Loaded notation with {len(self._moves)} plies")

    def history_verbose(self) -> list[MoveDetail]:
        """Return the moves of the loaded game with SAN and side filled in."""
        board = chess.Board(self._start_fen)
        history = []
        for move in self._moves:
            history.append(_detail_for(board, move))
            board.push(move)
        return history

    def reset(self) -> None:
        """Return to the last loaded starting position."""
        self.board = chess.Board(self._start_fen)

    def fen(self) -> str:
        """Full FEN of the current position."""
        return self.board.fen()

    def apply_move(self, move: "MoveDetail | chess.Move | str") -> MoveDetail:
        """Play a move on the board.

        Args:
            move: A MoveDetail, a python-chess Move, or a UCI / SAN string.

        Returns:
            The played move with SAN and side filled in.

        Raises:
            IllegalMoveError: If the move cannot be parsed or is not legal.
        """
        resolved = self._resolve(move)
        detail = _detail_for(self.board, resolved)
        self.board.push(resolved)
        return detail

    def side_to_move(self) -> Side:
        return Side.from_color(self.board.turn)

    def move_number(self) -> int:
        return self.board.fullmove_number

    def load_position(self, fen: str) -> None:
        """Set the position from a FEN string and make it the reset target.

        Raises:
            InvalidPositionError: If the FEN is malformed.
        """
        try:
            board = chess.Board(fen)
        except ValueError as e:
            raise InvalidPositionError(f"Invalid FEN '{fen}': {e}") from e
        self.board = board
        self._start_fen = board.fen()
        self._moves = []

    @contextmanager
    def preserved(self) -> Iterator["ChessGameState"]:
        """Restore the current position (and reset target) on exit."""
        saved_board = self.board.copy()
        saved_start = self._start_fen
        saved_moves = list(self._moves)
        try:
            yield self
        finally:
            self.board = saved_board
            self._start_fen = saved_start
            self._moves = saved_moves

    def _resolve(self, move: "MoveDetail | chess.Move | str") -> chess.Move:
        """Turn any accepted move form into a legal python-chess Move."""
        try:
            if isinstance(move, chess.Move):
                resolved = move
            elif isinstance(move, MoveDetail):
                resolved = chess.Move.from_uci(move.uci)
            else:
                resolved = self._parse_text(move)
        except ValueError as e:
            raise IllegalMoveError(f"Cannot read move {move!r} in {self.fen()}: {e}") from e

        if not self.board.is_legal(resolved):
            raise IllegalMoveError(f"Illegal move {resolved.uci()} in {self.fen()}")
        return resolved

    def _parse_text(self, text: str) -> chess.Move:
        # UCI first, SAN as fallback ("e4" is not valid UCI)
        try:
            move = chess.Move.from_uci(text)
        except ValueError:
            return self.board.parse_san(text)
        if self.board.is_legal(move):
            return move
        return self.board.parse_san(text)


def _detail_for(board: chess.Board, move: chess.Move) -> MoveDetail:
    """Describe ``move`` as played from ``board`` (before it is pushed)."""
    promotion = chess.piece_symbol(move.promotion) if move.promotion else None
    return MoveDetail(
        from_square=chess.square_name(move.from_square),
        to_square=chess.square_name(move.to_square),
        promotion=promotion,
        side=Side.from_color(board.turn),
        san=board.san(move),
    )


@contextmanager
def transient_state(
    fen: str,
    factory: Callable[[], GameState] | None = None,
) -> Iterator[GameState]:
    """Acquire a throwaway GameState positioned at ``fen``.

    Used to probe side to move, move number and the resulting position of a
    move without touching any state the caller holds.

    Args:
        fen: Position to load.
        factory: Callable returning a fresh GameState. Defaults to
            :class:`ChessGameState`.
    """
    state = factory() if factory is not None else ChessGameState()
    state.load_position(fen)
    yield state
