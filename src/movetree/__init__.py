"""movetree: explorable chess game records.

Builds a tree of moves from PGN text (mainline plus variations), aligns
``[%clk]`` annotations with plies, and stores analysis results per node.

- `from movetree import MoveTree`
- `from movetree.core.annotations import extract_clock_annotations`
- `from movetree.core.chess import ChessGameState, MoveDetail`
"""

from loguru import logger

__version__ = "0.1.0"

# Library code stays quiet until an application calls setup_logging()
logger.disable("movetree")

from movetree.core import load_config, load_tree_config, save_config, setup_logging  # noqa: E402
from movetree.core.analysis import AnalysisResult, Classification, EngineLine  # noqa: E402
from movetree.core.annotations import ClockAnnotation, extract_clock_annotations  # noqa: E402
from movetree.core.chess import ChessGameState, MoveDetail, Side  # noqa: E402
from movetree.core.tree import MoveNode, MoveTree  # noqa: E402

__all__ = [
    "AnalysisResult",
    "ChessGameState",
    "Classification",
    "ClockAnnotation",
    "EngineLine",
    "MoveDetail",
    "MoveNode",
    "MoveTree",
    "Side",
    "__version__",
    "extract_clock_annotations",
    "load_config",
    "load_tree_config",
    "save_config",
    "setup_logging",
]
