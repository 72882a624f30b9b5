"""Hunk data model for line-level diffs.

A hunk pairs a contiguous line range of the "before" text with the range of
the "after" text that replaces it. Ranges are zero-based and half-open.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Hunk:
    """A contiguous before/after line-range pair.

    Args:
        before_start: First line of the replaced range in the before text.
        before_count: Number of replaced lines (0 for a pure insertion).
        after_start: First line of the replacement range in the after text.
        after_count: Number of replacement lines (0 for a pure deletion).
    """

    before_start: int
    before_count: int
    after_start: int
    after_count: int

    def __post_init__(self) -> None:
        for name in ("before_start", "before_count", "after_start", "after_count"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")

    @property
    def before_end(self) -> int:
        return self.before_start + self.before_count

    @property
    def after_end(self) -> int:
        return self.after_start + self.after_count

    @property
    def is_insertion(self) -> bool:
        """True if the hunk only adds lines."""
        return self.before_count == 0

    @property
    def is_deletion(self) -> bool:
        """True if the hunk only removes lines."""
        return self.after_count == 0

    def before_range(self) -> range:
        return range(self.before_start, self.before_end)

    def after_range(self) -> range:
        return range(self.after_start, self.after_end)

    def describe(self) -> str:
        """Render as ``before[a..b] -> after[c..d]``."""
        return (
            f"before[{self.before_start}..{self.before_end}] -> "
            f"after[{self.after_start}..{self.after_end}]"
        )
