"""Line-level diffing, hunk classification, and selective patch application."""

from syncdoc.diff.apply import (
    apply_diff,
    apply_diff_restore,
    apply_hunks,
    strip_all_doc_attr_bookends,
    strip_doc_attr_bookends,
)
from syncdoc.diff.classify import is_doc_related, is_module_level, is_restore_related
from syncdoc.diff.differ import compute_line_diff, split_lines
from syncdoc.diff.hunk import Hunk
from syncdoc.diff.lines import DEFAULT_MARKERS, DocMarkers, LineKind, classify_line
from syncdoc.diff.split import split_hunk_if_mixed, split_hunks

__all__ = [
    "DEFAULT_MARKERS",
    "DocMarkers",
    "Hunk",
    "LineKind",
    "apply_diff",
    "apply_diff_restore",
    "apply_hunks",
    "classify_line",
    "compute_line_diff",
    "is_doc_related",
    "is_module_level",
    "is_restore_related",
    "split_hunk_if_mixed",
    "split_hunks",
    "split_lines",
    "strip_all_doc_attr_bookends",
    "strip_doc_attr_bookends",
]
