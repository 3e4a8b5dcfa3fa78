"""Explorable move tree for a single game record.

The tree keeps one principal path (the mainline) as a contiguous list
starting at the synthetic root, plus any number of variations hanging off
any node. Every node is indexed by id; nodes refer to their parent and
children by id only.

Example:
    tree = MoveTree()
    tree.build_from_notation(pgn_text)
    node = tree.add_move(MoveDetail.from_uci("g1f3"), tree.root.id)
    moves = tree.get_moves_to_node(node.id)
"""

import re
import threading
from collections.abc import Callable, Iterator, Mapping
from dataclasses import replace
from typing import Any

from loguru import logger

from movetree.core.analysis import AnalysisResult
from movetree.core.annotations import DEFAULT_CLOCK_MARKER, extract_clock_annotations
from movetree.core.chess.errors import IllegalMoveError
from movetree.core.chess.state import ChessGameState, GameState, MoveDetail, Side, transient_state
from movetree.core.configs.schema import MoveTreeConfig, TreeConfig
from movetree.core.tree.node import MoveNode

_ID_SUFFIXES = {"+": "check", "#": "mate"}
_ID_SUFFIX_RE = re.compile(r"[+#]")


class MoveTree:
    """Mainline plus variations, with a navigation cursor.

    Structural mutation (:meth:`build_from_notation`, :meth:`add_move`) and
    :meth:`update_classification` run under an internal re-entrant lock, so
    analysis results delivered from another thread never interleave with a
    structural write. Reads take no lock.
    """

    def __init__(
        self,
        config: TreeConfig | None = None,
        *,
        clock_marker: str = DEFAULT_CLOCK_MARKER,
        state_factory: Callable[[], GameState] | None = None,
    ) -> None:
        """Create an empty tree rooted at the standard starting position.

        Args:
            config: Node id scheme. Defaults to :class:`TreeConfig`.
            clock_marker: Comment command holding clock values in notation.
            state_factory: Callable returning a fresh GameState, used for
                transient replay. Defaults to :class:`ChessGameState`.
        """
        self.config = config or TreeConfig()
        self.clock_marker = clock_marker
        self._state_factory: Callable[[], GameState] = state_factory or ChessGameState
        self._lock = threading.RLock()
        self._id_counter = 0
        self._reset(self._state_factory().fen())

    @classmethod
    def from_config(cls, config: MoveTreeConfig, **kwargs: Any) -> "MoveTree":
        """Create a tree from a full :class:`MoveTreeConfig`."""
        return cls(config.tree, clock_marker=config.annotations.clock_marker, **kwargs)

    def _reset(self, fen: str) -> None:
        root = MoveNode(id=self.config.root_id, fen=fen)
        self._mainline: list[MoveNode] = [root]
        self._mainline_index: dict[str, int] = {root.id: 0}
        self._nodes: dict[str, MoveNode] = {root.id: root}
        self.current_node = root
        self.current_index = 0

    def build_from_notation(self, text: str, state: GameState | None = None) -> list[MoveDetail]:
        """Rebuild the tree from PGN text.

        Every prior node is discarded. The game is replayed through ``state``
        from its starting position; each ply becomes a mainline node carrying
        its FEN and, when present, its clock annotation. ``state`` is left at
        the final position of the game.

        Args:
            text: PGN text with optional headers and clock comments.
            state: GameState to replay through. A fresh one is created if omitted.

        Returns:
            The verbose move history reported by the rules engine.

        Raises:
            NotationError: If the rules engine cannot read the notation.
        """
        with self._lock:
            if state is None:
                state = self._state_factory()

            clocks = {
                record.move_index: record.clock
                for record in extract_clock_annotations(text, self.clock_marker)
            }

            state.load_notation(text)
            history = state.history_verbose()
            state.reset()
            self._reset(state.fen())

            for ply, move in enumerate(history):
                side = state.side_to_move()
                number = state.move_number()
                played = state.apply_move(move)
                parent_index = len(self._mainline) - 1

                node_id = self._make_id(self.config.mainline_prefix, number, side, played.san)
                if node_id in self._nodes:
                    node_id = f"{node_id}_{self._next_counter()}"

                self._append_mainline(
                    MoveNode(
                        id=node_id,
                        fen=state.fen(),
                        move_number=_ply_number(number, side),
                        san=played.san,
                        move=played,
                        is_mainline=True,
                        parent_id=self._mainline[parent_index].id,
                        parent_index=parent_index,
                        clock=clocks.get(ply),
                    )
                )

            logger.info(f"Built mainline with {len(history)} plies ({len(clocks)} clock annotations)")
            return history

    def add_move(self, move: MoveDetail | str, parent_id: str) -> MoveNode | None:
        """Insert a move below ``parent_id``, reusing an equivalent node.

        The new node extends the mainline only when its parent is the
        mainline tip; everything else becomes a variation appended to the
        parent's children.

        Args:
            move: The move to insert, as a MoveDetail or a UCI string.
            parent_id: Id of the node the move is played from.

        Returns:
            The new or pre-existing node, or None if ``parent_id`` is unknown.

        Raises:
            IllegalMoveError: If the rules engine rejects the move.
        """
        with self._lock:
            parent = self._nodes.get(parent_id)
            if parent is None:
                logger.debug(f"add_move: unknown parent '{parent_id}'")
                return None

            if isinstance(move, str):
                try:
                    move = MoveDetail.from_uci(move)
                except ValueError as e:
                    raise IllegalMoveError(f"Cannot read move {move!r}: {e}") from e

            existing = self._find_existing_move(parent, move)
            if existing is not None:
                logger.trace(f"add_move: reusing '{existing.id}'")
                return existing

            with transient_state(parent.fen, self._state_factory) as state:
                side = state.side_to_move()
                number = state.move_number()
                played = state.apply_move(move)
                fen = state.fen()

            san = move.san or played.san
            parent_index = self._mainline_index.get(parent.id)
            is_mainline = parent_index is not None and parent_index == len(self._mainline) - 1
            counter = self._next_counter()

            if is_mainline:
                node_id = self._make_id(self.config.mainline_prefix, number, side, san)
                if node_id in self._nodes:
                    node_id = f"{node_id}_{counter}"
            else:
                node_id = f"{self._make_id(self.config.variation_prefix, number, side, san)}_{counter}"

            node = MoveNode(
                id=node_id,
                fen=fen,
                move_number=_ply_number(number, side),
                san=san,
                move=replace(played, san=san),
                is_mainline=is_mainline,
                parent_id=parent.id,
                parent_index=parent_index if is_mainline else None,
            )

            if is_mainline:
                self._append_mainline(node)
            else:
                parent.children.append(node.id)
                self._nodes[node.id] = node

            logger.debug(f"add_move: created {'mainline' if is_mainline else 'variation'} node '{node.id}'")
            return node

    def _find_existing_move(self, parent: MoveNode, move: MoveDetail) -> MoveNode | None:
        parent_index = self._mainline_index.get(parent.id)
        if parent_index is not None and parent_index + 1 < len(self._mainline):
            successor = self._mainline[parent_index + 1]
            if successor.move is not None and successor.move.key == move.key:
                return successor

        for child_id in parent.children:
            child = self._nodes[child_id]
            if child.move is not None and child.move.key == move.key:
                return child
        return None

    def _append_mainline(self, node: MoveNode) -> None:
        self._mainline_index[node.id] = len(self._mainline)
        self._mainline.append(node)
        self._nodes[node.id] = node

    def _next_counter(self) -> int:
        self._id_counter += 1
        return self._id_counter

    @staticmethod
    def _make_id(prefix: str, number: int, side: Side, san: str) -> str:
        sanitized = _ID_SUFFIX_RE.sub(lambda m: _ID_SUFFIXES[m.group()], san)
        return f"{prefix}_{number}_{side.short}_{sanitized}"

    def update_classification(
        self,
        node_id: str,
        result: AnalysisResult | Mapping[str, Any],
    ) -> MoveNode | None:
        """Attach an analysis result to a node.

        Stores the classification label and, when the result carries a line
        ranked first, that line's score and score type. Unknown ids (for
        example results that arrive after a rebuild) are dropped.

        Returns:
            The updated node, or None if the id does not resolve.
        """
        with self._lock:
            node = self._nodes.get(node_id)
            if node is None:
                logger.debug(f"update_classification: dropping result for unknown node '{node_id}'")
                return None

            if not isinstance(result, AnalysisResult):
                result = AnalysisResult.from_dict(result)

            node.classification = result.classification
            node.analysis = result

            top = result.top_line
            if top is not None:
                node.eval_score = top.score
                node.eval_type = top.type or "cp"
            return node

    @property
    def root(self) -> MoveNode:
        return self._mainline[0]

    @property
    def mainline(self) -> tuple[MoveNode, ...]:
        """Mainline nodes, root first."""
        return tuple(self._mainline)

    @property
    def final(self) -> MoveNode | None:
        """Last mainline node, or None while the mainline holds only the root."""
        return self._mainline[-1] if len(self._mainline) > 1 else None

    def find_node(self, node_id: str) -> MoveNode | None:
        return self._nodes.get(node_id)

    def navigate_to(self, node_id: str) -> MoveNode | None:
        """Move the cursor to ``node_id``; None (cursor unchanged) if unknown."""
        node = self._nodes.get(node_id)
        if node is None:
            return None
        self.current_node = node
        index = self._mainline_index.get(node.id)
        if index is not None:
            self.current_index = index
        return node

    def get_next_move(self) -> MoveNode | None:
        """Node that follows the cursor: mainline successor or first child."""
        node = self.current_node
        index = self._mainline_index.get(node.id)
        if index is not None and index < len(self._mainline) - 1:
            return self._mainline[index + 1]
        if node.children:
            return self._nodes.get(node.children[0])
        return None

    def get_previous_move(self) -> MoveNode | None:
        """Node that precedes the cursor; None at the root."""
        node = self.current_node
        if node is self.root:
            return None
        index = self._mainline_index.get(node.id)
        if index is not None and index > 0:
            return self._mainline[index - 1]
        return self._nodes.get(node.parent_id) if node.parent_id else None

    def get_path_to_node(self, node_id: str) -> list[MoveNode]:
        """Nodes from just after the root down to ``node_id`` inclusive.

        Mainline nodes resolve to a slice of the mainline. Variation nodes
        walk parent ids up to their mainline branch point and prepend the
        mainline slice leading to it.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return []

        index = self._mainline_index.get(node.id)
        if index is not None:
            return self._mainline[1 : index + 1]

        branch: list[MoveNode] = []
        current: MoveNode | None = node
        while current is not None and current.id not in self._mainline_index:
            branch.append(current)
            current = self._nodes.get(current.parent_id) if current.parent_id else None
        branch.reverse()

        if current is None:
            return branch
        return self._mainline[1 : self._mainline_index[current.id] + 1] + branch

    def get_moves_to_node(self, node_id: str) -> list[tuple[str, MoveDetail]]:
        """(SAN, move) pairs leading from the starting position to ``node_id``."""
        return [
            (node.san, node.move)
            for node in self.get_path_to_node(node_id)
            if node.move is not None and node.san
        ]

    def children_of(self, node_id: str) -> list[MoveNode]:
        """Variation children of a node, in insertion order."""
        node = self._nodes.get(node_id)
        if node is None:
            return []
        return [self._nodes[child_id] for child_id in node.children]

    def variation_line(self, node_id: str) -> list[MoveNode]:
        """``node_id`` followed by its chain of primary continuations."""
        node = self._nodes.get(node_id)
        line: list[MoveNode] = []
        while node is not None:
            line.append(node)
            node = self._nodes.get(node.children[0]) if node.children else None
        return line

    def variation_depth(self, node_id: str) -> int:
        """Number of branch points between the mainline and ``node_id``.

        Mainline nodes are at depth 0, a variation off the mainline at 1,
        a variation of that variation at 2, and so on.
        """
        depth = 0
        node = self._nodes.get(node_id)
        while node is not None and not node.is_mainline:
            parent = self._nodes.get(node.parent_id) if node.parent_id else None
            if parent is None or parent.is_mainline or parent.children.index(node.id) > 0:
                depth += 1
            node = parent
        return depth

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[MoveNode]:
        return iter(self._nodes.values())


def _ply_number(number: int, side: Side) -> float:
    """Move number of a ply: n for White, n + 0.5 for Black."""
    return number if side is Side.WHITE else number + 0.5
