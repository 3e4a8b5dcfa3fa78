"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator

import pytest
from loguru import logger

from movetree.core.chess import ChessGameState
from movetree.core.tree import MoveTree

RUY_LOPEZ = "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 *"

CLOCKED_GAME = """[Event "Live Chess"]
[Site "Chess.com"]
[White "alice"]
[Black "bob"]
[Result "*"]
[TimeControl "300"]

1. e4 {[%clk 0:05:00]} 1... e5 {[%clk 0:04:58]} 2. Nf3 {[%clk 0:04:55.3]}
2... Nc6 {[%clk 0:04:50]} 3. Bb5 *
"""


@pytest.fixture(autouse=True)
def _quiet_loguru() -> Iterator[None]:
    """Drop any sinks a test (e.g. the CLI) installed."""
    yield
    logger.remove()
    logger.disable("movetree")


@pytest.fixture
def ruy_lopez() -> str:
    """Six plies, no annotations."""
    return RUY_LOPEZ


@pytest.fixture
def clocked_game() -> str:
    """Headers plus clock comments on the first four plies."""
    return CLOCKED_GAME


@pytest.fixture
def state() -> ChessGameState:
    """A fresh python-chess game state."""
    return ChessGameState()


@pytest.fixture
def tree(ruy_lopez: str) -> MoveTree:
    """Tree built from the Ruy Lopez mainline."""
    tree = MoveTree()
    tree.build_from_notation(ruy_lopez)
    return tree
