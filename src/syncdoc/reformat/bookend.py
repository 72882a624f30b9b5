"""Bookend reformatting of module-doc macro attributes.

A formatter cannot format a lone ``#![doc = module_doc!(...)]`` line in a
useful way, so its content is wrapped in a throwaway constant binding,
formatted, and unwrapped again.
"""

from __future__ import annotations

import logging
import re

from syncdoc.core.protocols import Formatter
from syncdoc.diff.lines import DEFAULT_MARKERS, DocMarkers, is_module_doc_macro
from syncdoc.formatter import MergeError

_INNER_ATTR_RE = re.compile(r"^(\s*)#\s*!\s*\[(.*)\]\s*$")

BOOKEND_PREFIX = "const _: i32 = {"
BOOKEND_SUFFIX = "};"


def needs_bookending(line: str, markers: DocMarkers = DEFAULT_MARKERS) -> bool:
    return is_module_doc_macro(line, markers)


def extract_bookend_content(line: str) -> str | None:
    """Return the text between ``#![`` and the final ``]``, stripped."""
    match = _INNER_ATTR_RE.match(line)
    if match is None:
        return None
    content = match.group(2).strip()
    return content or None


def create_bookended_expr(content: str) -> str:
    return f"{BOOKEND_PREFIX} {content} {BOOKEND_SUFFIX}"


def strip_bookends(formatted: str) -> str | None:
    """Recover the wrapped content from formatter output.

    The formatter may have broken the binding over several lines; the inner
    lines are rejoined with single spaces.
    """
    trimmed = formatted.strip()
    if not trimmed.startswith(BOOKEND_PREFIX) or not trimmed.endswith(BOOKEND_SUFFIX):
        return None
    inner = trimmed[len(BOOKEND_PREFIX) : len(trimmed) - len(BOOKEND_SUFFIX)]
    parts = [part.strip() for part in inner.splitlines() if part.strip()]
    content = " ".join(parts)
    return content or None


def reconstruct_inner_attr(content: str, indent: str = "") -> str:
    return f"{indent}#![{content}]"


class BookendReformatter:
    """Reformat module-doc macro lines through a formatter.

    Args:
        formatter: Formatter used on the synthetic snippet.
        markers: Names used to recognise the module-doc macro.
        logger: Logger for fallbacks; defaults to this module's logger.
    """

    def __init__(
        self,
        formatter: Formatter,
        markers: DocMarkers = DEFAULT_MARKERS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._formatter = formatter
        self._markers = markers
        self._logger = logger or logging.getLogger(__name__)

    def reformat_line(self, line: str) -> str | None:
        """Reformatted line, or None if any step of the round trip fails."""
        match = _INNER_ATTR_RE.match(line)
        content = extract_bookend_content(line)
        if match is None or content is None:
            self._logger.debug("No bookend content in %r", line)
            return None

        try:
            formatted = self._formatter.format(create_bookended_expr(content))
        except MergeError as exc:
            self._logger.debug("Bookend formatting failed for %r: %s", line, exc)
            return None

        stripped = strip_bookends(formatted)
        if stripped is None:
            self._logger.debug("Formatter output lost the bookend wrapper: %r", formatted)
            return None
        return reconstruct_inner_attr(stripped, match.group(1))

    def reformat_lines(self, text: str) -> str:
        """Reformat every module-doc macro line; other lines are untouched."""
        out: list[str] = []
        for line in text.split("\n"):
            if needs_bookending(line, self._markers):
                reformatted = self.reformat_line(line)
                out.append(line if reformatted is None else reformatted)
            else:
                out.append(line)
        return "\n".join(out)
