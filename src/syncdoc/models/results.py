"""Result data models for single-file and batch merges."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FileStatus(Enum):
    """Outcome of merging one file."""

    REWRITTEN = "rewritten"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class FileResult:
    """Outcome of merging one file pair.

    Args:
        path: Original file path, relative to the batch root where known.
        status: Whether the file was rewritten, left alone, or failed.
        hunks_total: Hunks after splitting.
        hunks_applied: Hunks the merge direction applied.
        output_path: Where the merged text was (or, in a dry run, would be)
            written.
        diff: Unified diff of original against merged text, if recorded.
        error: Failure message; required when status is FAILED.
    """

    path: str
    status: FileStatus
    hunks_total: int = 0
    hunks_applied: int = 0
    output_path: str | None = None
    diff: str = ""
    error: str | None = None

    def __post_init__(self) -> None:
        if self.status is FileStatus.FAILED and not self.error:
            raise ValueError("error is required when status is FAILED")
        if self.hunks_applied > self.hunks_total:
            raise ValueError(
                f"hunks_applied ({self.hunks_applied}) exceeds hunks_total ({self.hunks_total})"
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "path": self.path,
            "status": self.status.value,
            "hunks_total": self.hunks_total,
            "hunks_applied": self.hunks_applied,
            "output_path": self.output_path,
            "diff": self.diff,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileResult:
        """Deserialize from dictionary."""
        return cls(
            path=data["path"],
            status=FileStatus(data["status"]),
            hunks_total=data.get("hunks_total", 0),
            hunks_applied=data.get("hunks_applied", 0),
            output_path=data.get("output_path"),
            diff=data.get("diff", ""),
            error=data.get("error"),
        )


@dataclass
class BatchResult:
    """Aggregate result for a batch run.

    Args:
        direction: "migrate" or "restore".
        dry_run: Whether outputs were left unwritten.
        files: Per-file results in job order.
    """

    direction: str
    dry_run: bool = False
    files: list[FileResult] = field(default_factory=list)

    def _count(self, status: FileStatus) -> int:
        return sum(1 for f in self.files if f.status is status)

    @property
    def processed(self) -> int:
        return len(self.files) - self.failed

    @property
    def rewritten(self) -> int:
        return self._count(FileStatus.REWRITTEN)

    @property
    def unchanged(self) -> int:
        return self._count(FileStatus.UNCHANGED)

    @property
    def failed(self) -> int:
        return self._count(FileStatus.FAILED)

    @property
    def hunks_applied(self) -> int:
        return sum(f.hunks_applied for f in self.files)

    @property
    def errors(self) -> list[str]:
        return [f"{f.path}: {f.error}" for f in self.files if f.status is FileStatus.FAILED]

    def summary_stats(self) -> dict[str, int]:
        return {
            "processed": self.processed,
            "rewritten": self.rewritten,
            "unchanged": self.unchanged,
            "failed": self.failed,
            "hunks_applied": self.hunks_applied,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize entire batch result."""
        return {
            "direction": self.direction,
            "dry_run": self.dry_run,
            "summary_stats": self.summary_stats(),
            "files": [f.to_dict() for f in self.files],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BatchResult:
        """Deserialize from dictionary."""
        return cls(
            direction=data["direction"],
            dry_run=data.get("dry_run", False),
            files=[FileResult.from_dict(f) for f in data.get("files", [])],
        )
