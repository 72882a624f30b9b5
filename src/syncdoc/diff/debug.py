"""DEBUG-level dumps of hunk lists with before/after snippets."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from syncdoc.diff.hunk import Hunk


def log_hunks(
    logger: logging.Logger,
    label: str,
    before_lines: Sequence[str],
    after_lines: Sequence[str],
    hunks: Sequence[Hunk],
) -> None:
    """Log every hunk with the lines it covers. No-op unless DEBUG is enabled."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug(
        "%s: %d hunk(s), %d before line(s), %d after line(s)",
        label,
        len(hunks),
        len(before_lines),
        len(after_lines),
    )
    for i, hunk in enumerate(hunks):
        logger.debug("  hunk %d: %s", i, hunk.describe())
        for idx in hunk.before_range():
            if idx < len(before_lines):
                logger.debug("    - [%d] %r", idx, before_lines[idx])
        for idx in hunk.after_range():
            if idx < len(after_lines):
                logger.debug("    + [%d] %r", idx, after_lines[idx])
