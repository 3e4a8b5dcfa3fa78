"""Analysis results attached to tree nodes.

The analysis engine runs elsewhere; the tree only stores what it reports.
This module defines the result shape and turns raw UCI ``info`` output into
ranked engine lines.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loguru import logger

_MULTIPV_RE = re.compile(r"multipv (\d+)")
_DEPTH_RE = re.compile(r"depth (\d+)")
_SCORE_RE = re.compile(r"score (cp|mate) (-?\d+)")
_PV_RE = re.compile(r" pv (.+)$")


class Classification(Enum):
    """Move-quality labels produced by the classification collaborator."""

    BRILLIANT = "brilliant"
    GREAT = "great"
    BEST = "best"
    EXCELLENT = "excellent"
    GOOD = "good"
    BOOK = "book"
    FORCED = "forced"
    INACCURACY = "inaccuracy"
    MISTAKE = "mistake"
    BLUNDER = "blunder"

    @classmethod
    def from_label(cls, label: str) -> "Classification | None":
        """Look up a label case-insensitively; None for unknown labels."""
        try:
            return cls(label.lower())
        except ValueError:
            return None


@dataclass
class EngineLine:
    """One ranked candidate line from a multi-PV search."""

    id: int  # multipv rank, 1 is best
    score: float
    type: str = "cp"  # "cp" | "mate"
    depth: int | None = None
    uci_move: str | None = None
    pv: list[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Analysis of a single move as delivered by the analysis pipeline."""

    classification: str
    lines: list[EngineLine] = field(default_factory=list)

    @property
    def top_line(self) -> EngineLine | None:
        """The line ranked first (``id == 1``), if present."""
        return next((line for line in self.lines if line.id == 1), None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisResult":
        """Build a result from ``{classification: {type}, lines: [...]}``.

        ``classification`` may also be given as a bare string. Line entries
        without a usable id or score are skipped.
        """
        raw = data.get("classification")
        if isinstance(raw, Mapping):
            label = str(raw.get("type", ""))
        else:
            label = str(raw or "")

        lines = []
        for entry in data.get("lines") or []:
            try:
                lines.append(
                    EngineLine(
                        id=int(entry["id"]),
                        score=float(entry["score"]),
                        type=entry.get("type") or "cp",
                        depth=entry.get("depth"),
                        uci_move=entry.get("uciMove", entry.get("uci_move")),
                        pv=list(entry.get("pv") or []),
                    )
                )
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed engine line: {entry!r}")
        return cls(classification=label, lines=lines)


def parse_info_lines(output: Iterable[str], fen: str, target_depth: int) -> list[EngineLine]:
    """Parse UCI ``info`` output into ranked engine lines.

    Only lines searched to exactly ``target_depth`` are kept, one per multipv
    rank (the first one seen wins). Engines report scores from the side to
    move, so scores are negated when Black is to move in ``fen`` to make
    them White-relative.

    Args:
        output: Raw engine output lines.
        fen: Position the search was run on.
        target_depth: Depth whose lines should be returned.

    Returns:
        Engine lines in the order the engine reported them.
    """
    black_to_move = " b " in fen
    lines: list[EngineLine] = []
    seen: set[int] = set()

    for raw in output:
        if not raw.startswith("info depth"):
            continue

        multipv = _MULTIPV_RE.search(raw)
        depth = _DEPTH_RE.search(raw)
        pv = _PV_RE.search(raw)
        if multipv is None or depth is None or pv is None:
            continue

        line_id = int(multipv.group(1))
        line_depth = int(depth.group(1))
        if line_depth != target_depth or line_id in seen:
            continue

        score = _SCORE_RE.search(raw)
        kind, value = (score.group(1), int(score.group(2))) if score else ("cp", 0)
        moves = pv.group(1).split()

        lines.append(
            EngineLine(
                id=line_id,
                score=-value if black_to_move else value,
                type=kind,
                depth=line_depth,
                uci_move=moves[0],
                pv=moves,
            )
        )
        seen.add(line_id)

    return lines
