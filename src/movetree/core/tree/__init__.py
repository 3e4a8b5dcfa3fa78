"""Move tree: mainline plus variations over python-chess positions."""

from movetree.core.tree.node import MoveNode
from movetree.core.tree.tree import MoveTree

__all__ = ["MoveNode", "MoveTree"]
