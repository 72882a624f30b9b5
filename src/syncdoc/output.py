"""Report formatting for batch merge results."""

from __future__ import annotations

import difflib
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from syncdoc import __version__

if TYPE_CHECKING:
    from syncdoc.config import SyncdocConfig
    from syncdoc.models.results import BatchResult


def generate_diff(original: str, modified: str, path: str) -> str:
    """Unified diff of two texts, with ``a/`` and ``b/`` path prefixes.

    Returns:
        Empty string when the texts are identical.
    """
    return "".join(
        difflib.unified_diff(
            original.splitlines(keepends=True),
            modified.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
    )


class ReportFormatter:
    """Format and write batch results in multiple output formats."""

    def format_json(self, result: BatchResult, config: SyncdocConfig) -> str:
        """Serialize batch results as a JSON report.

        Args:
            result: Completed batch results.
            config: Configuration used for the run.

        Returns:
            JSON string with version, metadata, summary, and per-file detail.
        """
        report: dict[str, Any] = {
            "syncdoc_version": __version__,
            "direction": result.direction,
            "dry_run": result.dry_run,
            "formatter": config.formatter.command,
            "timestamp": datetime.now(UTC).isoformat(),
            "summary": result.summary_stats(),
            "files": [f.to_dict() for f in result.files],
        }
        return json.dumps(report, indent=2)

    def format_text(self, result: BatchResult) -> str:
        """Format batch results as a human-readable text report.

        Args:
            result: Completed batch results.

        Returns:
            Multi-line text report string.
        """
        title = "Restore" if result.direction == "restore" else "Migration"
        lines: list[str] = []
        lines.append(f"syncdoc {title} Report{' (dry run)' if result.dry_run else ''}")
        lines.append("=" * 50)

        stats = result.summary_stats()
        lines.append("Summary")
        lines.append("-" * 30)
        lines.append(f"  Processed:        {stats['processed']}")
        lines.append(f"  Rewritten:        {stats['rewritten']}")
        lines.append(f"  Unchanged:        {stats['unchanged']}")
        lines.append(f"  Failed:           {stats['failed']}")
        lines.append(f"  Hunks applied:    {stats['hunks_applied']}")
        lines.append("")

        if result.files:
            lines.append("Files")
            lines.append("-" * 30)
            for f in result.files:
                detail = f" ({f.error})" if f.error else f" {f.hunks_applied}/{f.hunks_total} hunks"
                lines.append(f"  [{f.status.value}] {f.path}{detail}")
            lines.append("")

        diffs = [f.diff for f in result.files if f.diff]
        if diffs:
            lines.append("Diffs")
            lines.append("-" * 30)
            lines.extend(d.rstrip("\n") for d in diffs)
            lines.append("")

        return "\n".join(lines)

    def write(
        self,
        result: BatchResult,
        path: Path,
        output_format: str,
        config: SyncdocConfig | None = None,
    ) -> None:
        """Write a formatted report to a file.

        Args:
            result: Completed batch results.
            path: Report file path.
            output_format: One of "json", "text".
            config: Required for JSON format.

        Raises:
            ValueError: If the format is unknown or config is missing for JSON.
        """
        if output_format == "json":
            if config is None:
                raise ValueError("config is required for JSON output format")
            content = self.format_json(result, config)
        elif output_format == "text":
            content = self.format_text(result)
        else:
            raise ValueError(f"Unknown output format: {output_format!r}")

        path.write_text(content, encoding="utf-8")
