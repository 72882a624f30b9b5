"""Hunk relevance predicates for the migrate and restore directions.

Each predicate looks only at the lines inside the hunk's before- and
after-ranges. Indices past the end of either text are ignored.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from syncdoc.diff.hunk import Hunk
from syncdoc.diff.lines import (
    DEFAULT_MARKERS,
    DocMarkers,
    is_doc_comment,
    is_doc_literal_attribute,
    is_module_doc_line,
    is_module_doc_macro,
    is_non_doc_attribute,
    is_reference_marker,
    is_regular_comment,
)


def _lines_in(lines: Sequence[str], start: int, count: int) -> Iterator[str]:
    end = min(start + count, len(lines))
    for idx in range(start, end):
        yield lines[idx]


def removed_lines(hunk: Hunk, before_lines: Sequence[str]) -> Iterator[str]:
    return _lines_in(before_lines, hunk.before_start, hunk.before_count)


def added_lines(hunk: Hunk, after_lines: Sequence[str]) -> Iterator[str]:
    return _lines_in(after_lines, hunk.after_start, hunk.after_count)


def is_doc_related(
    hunk: Hunk,
    before_lines: Sequence[str],
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> bool:
    """Forward (migrate) relevance.

    True if a removed line is a doc comment or a literal doc attribute, or
    an added line is a doc comment, a literal doc attribute, a reference
    marker, or a module-doc macro invocation.
    """
    for line in removed_lines(hunk, before_lines):
        if is_doc_comment(line) or is_doc_literal_attribute(line):
            return True

    for line in added_lines(hunk, after_lines):
        if (
            is_doc_comment(line)
            or is_doc_literal_attribute(line)
            or is_reference_marker(line, markers)
            or is_module_doc_macro(line, markers)
        ):
            return True

    return False


def is_restore_related(
    hunk: Hunk,
    before_lines: Sequence[str],
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> bool:
    """Reverse (restore) relevance.

    True if a removed line is a reference marker or a module-doc macro
    invocation, or an added line is a doc comment or a literal doc attribute.
    """
    for line in removed_lines(hunk, before_lines):
        if is_reference_marker(line, markers) or is_module_doc_macro(line, markers):
            return True

    for line in added_lines(hunk, after_lines):
        if is_doc_comment(line) or is_doc_literal_attribute(line):
            return True

    return False


def is_module_level(
    hunk: Hunk,
    after_lines: Sequence[str],
    markers: DocMarkers = DEFAULT_MARKERS,
) -> bool:
    """True if the hunk's after-range carries module-level documentation."""
    return any(is_module_doc_line(line, markers) for line in added_lines(hunk, after_lines))


def should_skip_from_after(line: str, markers: DocMarkers = DEFAULT_MARKERS) -> bool:
    """After-lines the applier never copies: they come from the original instead."""
    return is_non_doc_attribute(line, markers) or is_regular_comment(line)
