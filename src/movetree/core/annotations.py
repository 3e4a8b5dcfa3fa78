"""Clock annotation extraction from PGN text.

Online games usually carry the time left after each move as a comment such
as ``{[%clk 0:04:58.3]}``. The extractor below lines those comments up with
the mainline plies they follow. It is deliberately tolerant: annotations may
be missing for some plies, misplaced, or malformed, and the worst outcome is
fewer records than plies.

Example::

    records = extract_clock_annotations("1. e4 {[%clk 0:05:00]} e5 {[%clk 0:04:58]} 2. Nf3")
    # ply 0 (white) -> "0:05:00", ply 1 (black) -> "0:04:58", no record for ply 2
"""

import re
from dataclasses import dataclass

from loguru import logger

from movetree.core.chess.state import Side

DEFAULT_CLOCK_MARKER = "clk"

_HEADER_RE = re.compile(r"^\[.*\]\s*$", re.MULTILINE)
_COMMENT_RE = re.compile(r"\{[^}]*\}?|;[^\n]*")
_CLOCK_VALUE_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2}(?:\.\d+)?)$")

# Tokens that may follow a move number but are never moves.
_NOT_A_MOVE = r"(?!\d+\.|1-0|0-1|1/2-1/2|\*|\$\d+)"
_MOVE_PAIR_RE = re.compile(
    r"(?<!\S)(?P<number>\d+)\.(?P<dots>\.\.)?\s*"
    rf"(?P<first>{_NOT_A_MOVE}[^\s()]+)"
    r"(?:\s+(?:\$\d+|[!?]+))*"
    rf"(?:\s+(?P<second>{_NOT_A_MOVE}[^\s()]+))?"
)


@dataclass(frozen=True)
class ClockAnnotation:
    """Time remaining after one ply."""

    move_index: int  # zero-based ply in play order
    side: Side
    clock: str  # raw value, e.g. "0:04:58.3"

    @property
    def seconds(self) -> float | None:
        """Clock value in seconds, or None if it cannot be read."""
        return parse_clock(self.clock)


def parse_clock(value: str) -> float | None:
    """Convert ``H:MM:SS(.s)`` or ``MM:SS`` into seconds.

    Returns:
        Seconds as a float, or None for malformed values.
    """
    match = _CLOCK_VALUE_RE.match(value.strip())
    if match is None:
        return None
    hours, minutes, seconds = match.groups()
    return int(hours or 0) * 3600 + int(minutes) * 60 + float(seconds)


def strip_headers(text: str) -> str:
    """Remove ``[Key "Value"]`` header lines and return the movetext."""
    return _HEADER_RE.sub("", text).strip()


def extract_clock_annotations(
    text: str,
    marker: str = DEFAULT_CLOCK_MARKER,
) -> list[ClockAnnotation]:
    """Extract per-ply clock annotations from PGN text.

    Each mainline move token takes the first unused annotation that appears
    after it and before the next move token. Annotations that fall before a
    move token are never used again, and annotations inside variations are
    ignored. Extra annotations are dropped.

    Args:
        text: Raw PGN, optionally with header lines.
        marker: Comment command holding the clock value (``clk`` for ``[%clk ...]``).

    Returns:
        Records ordered by ply. Plies without an annotation have no record.
    """
    move_text = strip_headers(text)

    without_comments = _COMMENT_RE.sub(_blank, move_text)
    variations = _variation_spans(without_comments)
    clock_text = _blank_spans(move_text, variations)

    clock_re = re.compile(
        r"\{[^}]*\[%" + re.escape(marker) + r"\s+([^\]}]+)\][^}]*\}"
    )
    clocks = list(clock_re.finditer(clock_text))
    if not clocks:
        return []

    tokens = _move_tokens(_blank_spans(without_comments, variations))

    records: list[ClockAnnotation] = []
    clock_index = 0
    for ply, (offset, side) in enumerate(tokens):
        next_offset = tokens[ply + 1][0] if ply + 1 < len(tokens) else len(clock_text)

        while clock_index < len(clocks) and clocks[clock_index].start() < offset:
            clock_index += 1

        if clock_index < len(clocks) and clocks[clock_index].start() < next_offset:
            value = clocks[clock_index].group(1).strip()
            records.append(ClockAnnotation(move_index=ply, side=side, clock=value))
            clock_index += 1

    if clock_index < len(clocks):
        logger.debug(f"Ignored {len(clocks) - clock_index} trailing clock annotations")
    logger.debug(f"Extracted {len(records)} clock annotations for {len(tokens)} plies")
    return records


def _move_tokens(text: str) -> list[tuple[int, Side]]:
    """Offsets and sides of the move tokens in comment-free movetext."""
    tokens: list[tuple[int, Side]] = []
    for match in _MOVE_PAIR_RE.finditer(text):
        if match.group("dots"):
            tokens.append((match.start("first"), Side.BLACK))
            continue
        tokens.append((match.start("first"), Side.WHITE))
        if match.group("second"):
            tokens.append((match.start("second"), Side.BLACK))
    return tokens


def _variation_spans(text: str) -> list[tuple[int, int]]:
    """Character spans of top-level parenthesised variations."""
    spans: list[tuple[int, int]] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "(":
            if depth == 0:
                start = i
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
            if depth == 0:
                spans.append((start, i + 1))
    if depth > 0:
        spans.append((start, len(text)))
    return spans


def _blank(match: re.Match[str]) -> str:
    return " " * len(match.group())


def _blank_spans(text: str, spans: list[tuple[int, int]]) -> str:
    """Replace each span with spaces, keeping every other offset unchanged."""
    if not spans:
        return text
    parts = []
    last = 0
    for start, end in spans:
        parts.append(text[last:start])
        parts.append(" " * (end - start))
        last = end
    parts.append(text[last:])
    return "".join(parts)
