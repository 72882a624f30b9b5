"""Line-level diff computation.

Wraps ``difflib.SequenceMatcher`` and reshapes its opcodes into maximal
hunks: consecutive non-equal opcodes are coalesced so that a replacement
immediately followed by an insertion forms one hunk, the boundary the
splitter relies on.
"""

from __future__ import annotations

import difflib
import logging

from syncdoc.diff.hunk import Hunk

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    """Split text into lines without line terminators.

    A single trailing newline does not produce an empty final line, and
    ``\\r\\n`` terminators are stripped.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def compute_line_diff(before: str, after: str) -> list[Hunk]:
    """Compute ordered, non-overlapping hunks between two texts.

    Args:
        before: The before text.
        after: The after text.

    Returns:
        Hunks ordered by ``before_start``. Empty if the texts have identical
        lines.
    """
    return diff_lines(split_lines(before), split_lines(after))


def diff_lines(before_lines: list[str], after_lines: list[str]) -> list[Hunk]:
    """Compute hunks between two already-split line lists."""
    matcher = difflib.SequenceMatcher(None, before_lines, after_lines, autojunk=False)

    hunks: list[Hunk] = []
    pending: tuple[int, int, int, int] | None = None

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            if pending is not None:
                hunks.append(_to_hunk(pending))
                pending = None
            continue
        if pending is None:
            pending = (i1, i2, j1, j2)
        else:
            pending = (pending[0], i2, pending[2], j2)

    if pending is not None:
        hunks.append(_to_hunk(pending))

    logger.debug(
        "Diffed %d -> %d lines into %d hunk(s)",
        len(before_lines),
        len(after_lines),
        len(hunks),
    )
    return hunks


def _to_hunk(span: tuple[int, int, int, int]) -> Hunk:
    i1, i2, j1, j2 = span
    return Hunk(before_start=i1, before_count=i2 - i1, after_start=j1, after_count=j2 - j1)
