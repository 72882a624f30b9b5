"""Splitting of hunks that mix a module-level and an item-level doc change.

A line diff cannot see the boundary between a file's module docs and the
docs of the first item, so one hunk may cover both. The splitter finds the
boundary by content: a module-doc line, optionally followed by blank lines,
then an item-doc line.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from syncdoc.diff.hunk import Hunk
from syncdoc.diff.lines import (
    DEFAULT_MARKERS,
    DocMarkers,
    is_blank,
    is_item_doc_line,
    is_module_doc_line,
)

logger = logging.getLogger(__name__)

# Module-doc macro line plus the blank spacer that follows it.
MODULE_BEFORE_LINES = 2


def find_split_point(
    hunk: Hunk,
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> int | None:
    """Return the after-index of the first item-doc line following module docs.

    Returns:
        Absolute index into ``after_lines``, or None if the after-range has
        no module-doc line directly (modulo blanks) followed by an item-doc
        line.
    """
    end = min(hunk.after_end, len(after_lines))

    for idx in range(hunk.after_start, end):
        if not is_module_doc_line(after_lines[idx], markers):
            continue

        nxt = idx + 1
        while nxt < end and is_blank(after_lines[nxt]):
            nxt += 1
        if nxt >= end:
            return None

        candidate = after_lines[nxt]
        if is_module_doc_line(candidate, markers):
            continue
        if is_item_doc_line(candidate):
            return nxt

    return None


def split_hunk_if_mixed(
    hunk: Hunk,
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> list[Hunk]:
    """Split a hunk spanning module docs and item docs into two hunks.

    Pure insertions and pure deletions are never split. The first half takes
    the after-lines up to (not including) the item-doc line, and two
    before-lines when available (one otherwise). The halves partition the
    same before/after spans as the input hunk.

    Args:
        hunk: Hunk to inspect.
        after_lines: Lines of the after text.
        markers: Reference-marker and module-doc macro names.

    Returns:
        ``[hunk]`` unchanged, or the two halves in order.
    """
    if hunk.before_count == 0 or hunk.after_count == 0:
        return [hunk]

    split_at = find_split_point(hunk, after_lines, markers)
    if split_at is None:
        return [hunk]

    first_before = MODULE_BEFORE_LINES if hunk.before_count >= MODULE_BEFORE_LINES else 1
    if hunk.before_count < first_before:
        logger.debug("Not splitting %s: too few before-lines", hunk.describe())
        return [hunk]

    first_after = split_at - hunk.after_start
    first = Hunk(
        before_start=hunk.before_start,
        before_count=first_before,
        after_start=hunk.after_start,
        after_count=first_after,
    )
    second = Hunk(
        before_start=hunk.before_start + first_before,
        before_count=hunk.before_count - first_before,
        after_start=split_at,
        after_count=hunk.after_count - first_after,
    )
    logger.debug("Split %s into %s and %s", hunk.describe(), first.describe(), second.describe())
    return [first, second]


def split_hunks(
    hunks: Sequence[Hunk],
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> list[Hunk]:
    """Apply :func:`split_hunk_if_mixed` to every hunk, preserving order."""
    result: list[Hunk] = []
    for hunk in hunks:
        result.extend(split_hunk_if_mixed(hunk, after_lines, markers))
    return result
