"""Node type stored in a MoveTree."""

from dataclasses import dataclass, field

from movetree.core.analysis import AnalysisResult
from movetree.core.chess.state import MoveDetail, Side


@dataclass
class MoveNode:
    """One ply of a game record, or the synthetic root.

    Nodes refer to each other by id only; the owning :class:`MoveTree`
    resolves ids through its index. ``children`` holds variation children
    in insertion order (``children[0]`` is the primary continuation). The
    mainline successor of a mainline node is not listed there; it is the
    next entry of the tree's mainline.
    """

    id: str
    fen: str
    move_number: float | None = None  # n for White, n + 0.5 for Black
    san: str | None = None
    move: MoveDetail | None = None
    is_mainline: bool = True
    parent_id: str | None = None
    parent_index: int | None = None  # mainline index of the parent, mainline nodes only
    children: list[str] = field(default_factory=list)

    # Attached after construction
    clock: str | None = None
    classification: str | None = None
    eval_score: float | None = None
    eval_type: str | None = None
    analysis: AnalysisResult | None = field(default=None, repr=False)

    @property
    def is_root(self) -> bool:
        return self.move is None

    @property
    def side(self) -> Side | None:
        """Side that played the move leading to this node."""
        return self.move.side if self.move is not None else None
