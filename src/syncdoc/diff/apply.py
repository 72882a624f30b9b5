"""Selective application of diff hunks to an original text.

Only hunks accepted by a relevance predicate are applied. Everything else,
including non-doc attributes and ordinary comments inside applied hunks, is
copied from the original line for line.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from syncdoc.diff.classify import (
    added_lines,
    is_doc_related,
    is_module_level,
    is_restore_related,
    removed_lines,
    should_skip_from_after,
)
from syncdoc.diff.debug import log_hunks
from syncdoc.diff.differ import split_lines
from syncdoc.diff.hunk import Hunk
from syncdoc.diff.lines import (
    DEFAULT_MARKERS,
    DocMarkers,
    is_blank,
    is_module_doc_line,
    is_non_doc_attribute,
    is_regular_comment,
)
from syncdoc.diff.split import split_hunks

if TYPE_CHECKING:
    from syncdoc.core.protocols import RelevancePredicate

_module_logger = logging.getLogger(__name__)

_BOOKEND_RE = re.compile(r'^(\s*)#\s*\[\s*doc\s*=\s*"((?:///|//!).*)"\s*\]\s*$')
_ESCAPE_RE = re.compile(r"""\\(["'\\])""")


def order_hunks(
    hunks: Sequence[Hunk],
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> list[Hunk]:
    """Module-level hunks first, then item-level hunks, each by ``before_start``."""
    return sorted(
        hunks,
        key=lambda h: (not is_module_level(h, after_lines, markers), h.before_start),
    )


def count_removed_blanks(before: Sequence[str]) -> int:
    """Blank lines in a before-range that do not directly follow an ordinary comment.

    A blank directly after an ordinary comment is re-emitted together with
    the comment by :func:`preserve_non_doc_lines` instead.
    """
    count = 0
    for idx, line in enumerate(before):
        if not is_blank(line):
            continue
        if idx > 0 and is_regular_comment(before[idx - 1]):
            continue
        count += 1
    return count


def preserve_non_doc_lines(
    before: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> list[str]:
    """Lines of a before-range that must survive the hunk, in original order.

    Non-doc attributes, ordinary comments, and the single blank line directly
    following a kept comment.
    """
    kept: list[str] = []
    after_comment = False
    for line in before:
        if is_regular_comment(line):
            kept.append(line)
            after_comment = True
            continue
        if is_non_doc_attribute(line, markers):
            kept.append(line)
        elif is_blank(line) and after_comment:
            kept.append(line)
        after_comment = False
    return kept


def _is_module_doc_hunk(
    hunk: Hunk,
    after_lines: Sequence[str],
    markers: DocMarkers,
) -> bool:
    for line in added_lines(hunk, after_lines):
        if not is_blank(line):
            return is_module_doc_line(line, markers)
    return False


def render_hunk(
    hunk: Hunk,
    original_lines: Sequence[str],
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> list[str]:
    """Lines that replace the hunk's before-range in the merged output.

    Preserved original lines come first. Blank lines removed by the hunk are
    re-inserted before the new content, or after it when the new content is
    module documentation.
    """
    before = list(removed_lines(hunk, original_lines))
    removed_blanks = count_removed_blanks(before)
    module_doc = _is_module_doc_hunk(hunk, after_lines, markers)

    out = preserve_non_doc_lines(before, markers)
    if removed_blanks and not module_doc:
        out.extend([""] * removed_blanks)
    out.extend(
        line for line in added_lines(hunk, after_lines) if not should_skip_from_after(line, markers)
    )
    if removed_blanks and module_doc:
        out.extend([""] * removed_blanks)
    return out


def apply_hunks(
    original: str,
    hunks: Sequence[Hunk],
    formatted_after: str,
    is_relevant: RelevancePredicate,
    post_process: Callable[[str], str] | None = None,
    markers: DocMarkers = DEFAULT_MARKERS,
    logger: logging.Logger | None = None,
) -> str:
    """Merge the relevant hunks of ``formatted_after`` into ``original``.

    Hunks are processed module-level first. Each applied hunk replaces its
    own before-range, so processing order only decides placement between
    hunks anchored at the same original line. Irrelevant hunks leave the
    original lines untouched and their after-lines are discarded.

    Args:
        original: Text the hunks' before-ranges refer to.
        hunks: Non-overlapping hunks, already split if needed.
        formatted_after: Text the hunks' after-ranges refer to.
        is_relevant: Direction-specific relevance predicate.
        post_process: Optional whole-output transform applied before the
            trailing newline is normalised.
        markers: Reference-marker and module-doc macro names.
        logger: Logger for tracing; defaults to this module's logger.

    Returns:
        The merged text, ending in exactly one newline (empty stays empty).
    """
    log = logger or _module_logger
    original_lines = split_lines(original)
    after_lines = split_lines(formatted_after)

    ordered = order_hunks(hunks, after_lines, markers)
    log_hunks(log, "Applying hunks", original_lines, after_lines, ordered)

    patches: list[tuple[int, int, list[str]]] = []
    for hunk in ordered:
        if not is_relevant(hunk, original_lines, after_lines, markers):
            log.debug("Skipping irrelevant hunk %s", hunk.describe())
            continue
        patches.append(
            (
                hunk.before_start,
                hunk.before_count,
                render_hunk(hunk, original_lines, after_lines, markers),
            )
        )

    # Stable sort keeps processing order between hunks sharing an anchor.
    patches.sort(key=lambda patch: patch[0])

    result: list[str] = []
    cursor = 0
    for start, count, lines in patches:
        start = min(start, len(original_lines))
        if start < cursor:
            log.warning("Ignoring hunk overlapping already merged lines at %d", start)
            continue
        result.extend(original_lines[cursor:start])
        result.extend(lines)
        cursor = min(start + count, len(original_lines))
    result.extend(original_lines[cursor:])

    merged = "\n".join(result)
    if post_process is not None:
        merged = post_process(merged)
    return _ensure_trailing_newline(merged)


def _ensure_trailing_newline(text: str) -> str:
    stripped = text.rstrip("\n")
    return stripped + "\n" if stripped else ""


def strip_doc_attr_bookends(line: str) -> str:
    """Turn ``#[doc = "/// text"]`` back into ``/// text`` (same for ``//!``).

    Indentation is kept. Lines of any other shape are returned unchanged.
    """
    match = _BOOKEND_RE.match(line)
    if match is None:
        return line
    indent, content = match.groups()
    content = _ESCAPE_RE.sub(r"\1", content)
    if content in ("/// ", "//! "):
        content = content.rstrip()
    return f"{indent}{content}"


def strip_all_doc_attr_bookends(text: str) -> str:
    return "\n".join(strip_doc_attr_bookends(line) for line in text.split("\n"))


def apply_diff(
    original: str,
    hunks: Sequence[Hunk],
    formatted_after: str,
    markers: DocMarkers = DEFAULT_MARKERS,
    logger: logging.Logger | None = None,
) -> str:
    """Split mixed hunks and apply only the doc-related ones."""
    split = split_hunks(hunks, split_lines(formatted_after), markers)
    return apply_hunks(original, split, formatted_after, is_doc_related, None, markers, logger)


def apply_diff_restore(
    original: str,
    hunks: Sequence[Hunk],
    formatted_after: str,
    markers: DocMarkers = DEFAULT_MARKERS,
    logger: logging.Logger | None = None,
) -> str:
    """Split mixed hunks, apply the restore-related ones, and strip doc bookends."""
    split = split_hunks(hunks, split_lines(formatted_after), markers)
    return apply_hunks(
        original,
        split,
        formatted_after,
        is_restore_related,
        strip_all_doc_attr_bookends,
        markers,
        logger,
    )
