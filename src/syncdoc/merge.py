"""Format-preserving documentation merge.

Both texts are normalised by the formatter, diffed line by line, and only the
documentation hunks of the transformed side are applied to the original.
Every other original line is kept, so a file whose docs move to (or back
from) external markdown keeps the rest of its formatting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from syncdoc.diff.apply import apply_hunks, strip_all_doc_attr_bookends
from syncdoc.diff.classify import is_doc_related, is_module_level, is_restore_related
from syncdoc.diff.debug import log_hunks
from syncdoc.diff.differ import diff_lines, split_lines
from syncdoc.diff.hunk import Hunk
from syncdoc.diff.lines import DEFAULT_MARKERS, DocMarkers
from syncdoc.diff.split import split_hunks
from syncdoc.reformat.bookend import BookendReformatter

if TYPE_CHECKING:
    from syncdoc.config import SyncdocConfig
    from syncdoc.core.protocols import Formatter, RelevancePredicate

logger = logging.getLogger(__name__)


class MergeDirection(Enum):
    """Which way documentation moves."""

    MIGRATE = "migrate"
    RESTORE = "restore"


@dataclass(frozen=True, slots=True)
class MergePlan:
    """Everything the merge decided before writing a line.

    Args:
        direction: Merge direction the relevance flags were computed for.
        formatted_original: Original after formatting; hunk before-ranges
            index into its lines.
        formatted_transformed: Transformed text after formatting; hunk
            after-ranges index into its lines.
        hunks: Raw hunks from the line differ.
        split: Hunks after mixed module/item hunks were split.
        relevant: Per entry of ``split``, whether the direction applies it.
        module_level: Per entry of ``split``, whether it carries module docs.
    """

    direction: MergeDirection
    formatted_original: str
    formatted_transformed: str
    hunks: tuple[Hunk, ...]
    split: tuple[Hunk, ...]
    relevant: tuple[bool, ...]
    module_level: tuple[bool, ...]

    @property
    def applied_count(self) -> int:
        return sum(self.relevant)

    @property
    def has_changes(self) -> bool:
        return self.applied_count > 0


class DocMerger:
    """Merge documentation changes from a transformed file into its original.

    Args:
        formatter: Deterministic formatter applied to both inputs.
        markers: Reference-marker and module-doc macro names.
        logger: Logger for tracing; hunk dumps are emitted at DEBUG.
        split_mixed_hunks: Split hunks spanning module and item docs.
        reformat_bookends: Reformat module-doc macro lines after a migrate.
    """

    def __init__(
        self,
        formatter: Formatter,
        markers: DocMarkers = DEFAULT_MARKERS,
        logger: logging.Logger | None = None,
        split_mixed_hunks: bool = True,
        reformat_bookends: bool = True,
    ) -> None:
        self._formatter = formatter
        self._markers = markers
        self._logger = logger or logging.getLogger(__name__)
        self._split_mixed_hunks = split_mixed_hunks
        self._reformat_bookends = reformat_bookends

    @classmethod
    def from_config(
        cls,
        config: SyncdocConfig,
        formatter: Formatter | None = None,
        logger: logging.Logger | None = None,
    ) -> DocMerger:
        """Build a merger from config, creating the configured formatter if none is given."""
        if formatter is None:
            from syncdoc.formatter import get_formatter

            formatter = get_formatter(config)
        return cls(
            formatter,
            markers=config.markers.to_markers(),
            logger=logger,
            split_mixed_hunks=config.merge.split_mixed_hunks,
            reformat_bookends=config.merge.reformat_bookends,
        )

    @property
    def markers(self) -> DocMarkers:
        return self._markers

    def _predicate(self, direction: MergeDirection) -> RelevancePredicate:
        if direction is MergeDirection.MIGRATE:
            return is_doc_related
        return is_restore_related

    def plan(self, original: str, transformed: str, direction: MergeDirection) -> MergePlan:
        """Format, diff, split, and classify without producing output.

        Raises:
            FormatterFailed: If the formatter fails on either input.
            EncodingError: If the formatter output is not UTF-8.
        """
        formatted_original = self._formatter.format(original)
        formatted_transformed = self._formatter.format(transformed)

        before_lines = split_lines(formatted_original)
        after_lines = split_lines(formatted_transformed)

        hunks = diff_lines(before_lines, after_lines)
        log_hunks(self._logger, f"{direction.value} diff", before_lines, after_lines, hunks)

        if self._split_mixed_hunks:
            split = split_hunks(hunks, after_lines, self._markers)
        else:
            split = list(hunks)

        predicate = self._predicate(direction)
        relevant = tuple(predicate(h, before_lines, after_lines, self._markers) for h in split)
        module_level = tuple(is_module_level(h, after_lines, self._markers) for h in split)

        self._logger.debug(
            "%s: %d hunk(s), %d after splitting, %d relevant",
            direction.value,
            len(hunks),
            len(split),
            sum(relevant),
        )
        return MergePlan(
            direction=direction,
            formatted_original=formatted_original,
            formatted_transformed=formatted_transformed,
            hunks=tuple(hunks),
            split=tuple(split),
            relevant=relevant,
            module_level=module_level,
        )

    def apply_plan(self, plan: MergePlan) -> str:
        """Produce the merged text for a plan returned by :meth:`plan`."""
        if plan.direction is MergeDirection.MIGRATE:
            merged = apply_hunks(
                plan.formatted_original,
                plan.split,
                plan.formatted_transformed,
                is_doc_related,
                None,
                self._markers,
                self._logger,
            )
            if self._reformat_bookends:
                reformatter = BookendReformatter(self._formatter, self._markers, self._logger)
                merged = reformatter.reformat_lines(merged)
            return merged

        return apply_hunks(
            plan.formatted_original,
            plan.split,
            plan.formatted_transformed,
            is_restore_related,
            strip_all_doc_attr_bookends,
            self._markers,
            self._logger,
        )

    def merge(self, original: str, transformed: str, direction: MergeDirection) -> str:
        return self.apply_plan(self.plan(original, transformed, direction))

    def migrate(self, original: str, transformed: str) -> str:
        """Apply the doc changes of a migrate transform to ``original``."""
        return self.merge(original, transformed, MergeDirection.MIGRATE)

    def restore(self, original: str, transformed: str) -> str:
        """Apply the doc changes of a restore transform to ``original``."""
        return self.merge(original, transformed, MergeDirection.RESTORE)


def _default_merger(formatter: Formatter | None, log: logging.Logger | None) -> DocMerger:
    if formatter is None:
        from syncdoc.formatter.rustfmt import RustfmtFormatter

        formatter = RustfmtFormatter()
    return DocMerger(formatter, logger=log)


def migrate_merge(
    original: str,
    transformed: str,
    *,
    formatter: Formatter | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Merge a migrate transform (inline docs → external references) into ``original``.

    Args:
        original: Source text as it exists on disk.
        transformed: The same source after the doc-stripping transform.
        formatter: Formatter for both texts; defaults to ``rustfmt``.
        logger: Logger for tracing; defaults to ``syncdoc.merge``.

    Returns:
        The original with only documentation spans changed, ending in a
        single newline.

    Raises:
        FormatterFailed: If the formatter fails on either input.
        EncodingError: If the formatter output is not UTF-8.
    """
    return _default_merger(formatter, logger).migrate(original, transformed)


def restore_merge(
    original: str,
    transformed: str,
    *,
    formatter: Formatter | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Merge a restore transform (external references → inline docs) into ``original``.

    Same contract as :func:`migrate_merge`; ``#[doc = "/// ..."]`` lines in
    the result are turned back into plain doc comments.
    """
    return _default_merger(formatter, logger).restore(original, transformed)
