"""Line kinds derived by inspecting a single source line.

Attribute lines are compared with all whitespace removed, so the spaced-out
token-stream rendering (``# [derive (Debug)]``, ``# ! [doc = ...]``)
classifies the same as the canonical form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_WHITESPACE_RE = re.compile(r"\s+")
_DOC_LITERAL_RE = re.compile(r'^#!?\[doc=(?:r#*)?"')
_BOOKENDED_INNER_RE = re.compile(r'^#\[doc=(?:r#*)?"//!')


class LineKind(Enum):
    """Classification of a source line."""

    DOC_COMMENT = "doc_comment"
    DOC_ATTRIBUTE = "doc_attribute"
    REFERENCE_MARKER = "reference_marker"
    MODULE_DOC_MACRO = "module_doc_macro"
    NON_DOC_ATTRIBUTE = "non_doc_attribute"
    REGULAR_COMMENT = "regular_comment"
    BLANK = "blank"
    CODE = "code"


@dataclass(frozen=True, slots=True)
class DocMarkers:
    """Names of the external-documentation attribute and module macro.

    Args:
        reference_marker: Last path segment of the item attribute that
            replaces inline docs (``#[omnidoc]``, ``#[syncdoc::omnidoc]``).
        module_doc_macro: Name of the macro resolving a module's docs
            (``#![doc = syncdoc::module_doc!()]``).
    """

    reference_marker: str = "omnidoc"
    module_doc_macro: str = "module_doc"


DEFAULT_MARKERS = DocMarkers()


def squash(line: str) -> str:
    """Remove all whitespace from a line."""
    return _WHITESPACE_RE.sub("", line)


def is_blank(line: str) -> bool:
    return not line.strip()


def is_outer_doc_comment(line: str) -> bool:
    stripped = line.lstrip()
    return stripped.startswith("///") and not stripped.startswith("////")


def is_inner_doc_comment(line: str) -> bool:
    return line.lstrip().startswith("//!")


def is_doc_comment(line: str) -> bool:
    """``///`` or ``//!`` comment (``////`` is an ordinary comment)."""
    return is_outer_doc_comment(line) or is_inner_doc_comment(line)


def is_regular_comment(line: str) -> bool:
    return line.lstrip().startswith("//") and not is_doc_comment(line)


def is_outer_attribute(line: str) -> bool:
    return squash(line).startswith("#[")


def is_inner_attribute(line: str) -> bool:
    return squash(line).startswith("#![")


def is_doc_attribute(line: str) -> bool:
    """``#[doc = ...]`` or ``#![doc = ...]`` with any value."""
    compact = squash(line)
    return compact.startswith("#[doc=") or compact.startswith("#![doc=")


def is_doc_literal_attribute(line: str) -> bool:
    """Doc attribute whose value is a string literal."""
    return _DOC_LITERAL_RE.match(squash(line)) is not None


def _attribute_path(compact: str) -> str:
    body = compact[2:] if compact.startswith("#[") else compact[3:]
    for stop, char in enumerate(body):
        if char in "(]=":
            return body[:stop]
    return body


def is_reference_marker(line: str, markers: DocMarkers = DEFAULT_MARKERS) -> bool:
    """Outer attribute naming the external-doc macro, with or without arguments."""
    compact = squash(line)
    if not compact.startswith("#["):
        return False
    return _attribute_path(compact).split("::")[-1] == markers.reference_marker


def is_module_doc_macro(line: str, markers: DocMarkers = DEFAULT_MARKERS) -> bool:
    """Inner attribute invoking the module-doc macro."""
    compact = squash(line)
    if not compact.startswith("#!["):
        return False
    pattern = rf"(?:^|[^A-Za-z0-9_]){re.escape(markers.module_doc_macro)}!"
    return re.search(pattern, compact) is not None


def is_non_doc_attribute(line: str, markers: DocMarkers = DEFAULT_MARKERS) -> bool:
    """Any attribute that is neither a doc form nor a reference marker."""
    if is_doc_attribute(line):
        return False
    if is_outer_attribute(line):
        return not is_reference_marker(line, markers)
    if is_inner_attribute(line):
        return not is_module_doc_macro(line, markers)
    return False


def is_module_doc_line(line: str, markers: DocMarkers = DEFAULT_MARKERS) -> bool:
    """Any rendering of module-level documentation.

    Covers inner doc attributes, the module-doc macro, ``//!`` comments and
    outer doc attributes carrying a ``//!`` literal.
    """
    if is_inner_doc_comment(line):
        return True
    if is_inner_attribute(line):
        return is_doc_attribute(line) or is_module_doc_macro(line, markers)
    return _BOOKENDED_INNER_RE.match(squash(line)) is not None


def is_item_doc_line(line: str) -> bool:
    """Outer attribute or ``///`` comment, the forms an item's docs start with."""
    return is_outer_attribute(line) or is_outer_doc_comment(line)


def classify_line(line: str, markers: DocMarkers = DEFAULT_MARKERS) -> LineKind:
    """Derive the kind of a single line."""
    if is_blank(line):
        return LineKind.BLANK
    if is_doc_comment(line):
        return LineKind.DOC_COMMENT
    if is_regular_comment(line):
        return LineKind.REGULAR_COMMENT
    if is_module_doc_macro(line, markers):
        return LineKind.MODULE_DOC_MACRO
    if is_reference_marker(line, markers):
        return LineKind.REFERENCE_MARKER
    if is_doc_attribute(line):
        return LineKind.DOC_ATTRIBUTE
    if is_non_doc_attribute(line, markers):
        return LineKind.NON_DOC_ATTRIBUTE
    return LineKind.CODE
