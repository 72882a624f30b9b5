"""Progress reporting for batch merges."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

if TYPE_CHECKING:
    from rich.progress import TaskID

    from syncdoc.models.results import BatchResult


@dataclass(frozen=True, slots=True)
class PipelineEvent:
    """Immutable event emitted by each batch stage.

    Attributes:
        state: Pipeline state name (e.g. "MERGING", "WRITING").
        path: Relative path of the file concerned, if applicable.
        file_index: Zero-based index of the current file.
        total_files: Total number of files in the batch.
        detail: Human-readable detail string for verbose output.
    """

    state: str
    path: str | None
    file_index: int
    total_files: int
    detail: str


class ProgressReporter:
    """Rich-based progress display for batch merges.

    Renders a live progress bar on TTY stderr. Falls back to structured
    log messages when stderr is not a terminal.
    """

    def __init__(
        self,
        console: Console,
        verbose: bool = False,
        quiet: bool = False,
    ) -> None:
        self._console = console
        self._verbose = verbose
        self._quiet = quiet
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._current_state: str = ""
        self._is_tty: bool = sys.stderr.isatty()
        self._logger: logging.Logger = logging.getLogger("syncdoc.progress")

    def callback(self, event: PipelineEvent) -> None:
        """Handle a pipeline event -- update progress display."""
        if self._quiet:
            return

        if event.state != self._current_state:
            self._current_state = event.state
            if self._progress is not None and self._task_id is not None:
                self._progress.update(self._task_id, description=f"[cyan]{event.state}")

        if self._progress is not None and self._task_id is not None and event.total_files:
            self._progress.update(
                self._task_id,
                completed=event.file_index + 1,
                total=event.total_files,
            )

        if self._verbose and event.detail:
            if self._is_tty:
                self._console.print(f"  [dim]{event.detail}[/dim]")
            else:
                self._logger.info(event.detail)

        if not self._is_tty and not self._verbose:
            self._logger.info(
                "%s [%d/%d] %s",
                event.state,
                event.file_index + 1,
                event.total_files,
                event.detail,
            )

    def start(self, total_files: int) -> None:
        """Start the progress display."""
        if self._quiet:
            return

        if self._is_tty:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                console=self._console,
            )
            self._progress.start()
            self._task_id = self._progress.add_task("[cyan]STARTING", total=total_files)
        else:
            self._logger.info("Batch started -- %d files to process", total_files)

    def finish(self, batch_result: BatchResult) -> None:
        """Stop progress and print summary table."""
        if self._progress is not None:
            self._progress.stop()
            self._progress = None

        if self._quiet:
            return

        self._console.print(build_summary_table(batch_result))

        errors = batch_result.errors
        if errors:
            self._console.print(f"[red]Errors: {len(errors)}[/red]")
            if self._verbose:
                for error in errors:
                    self._console.print(f"  - {error}")
            else:
                self._console.print("Run with --verbose to see details")


def summary_title(batch_result: BatchResult) -> str:
    if batch_result.dry_run:
        return "Dry Run Summary"
    if batch_result.direction == "restore":
        return "Restore Summary"
    return "Migration Summary"


def build_summary_table(batch_result: BatchResult) -> Table:
    table = Table(title=summary_title(batch_result), show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    stats = batch_result.summary_stats()
    table.add_row("Processed", str(stats["processed"]))
    table.add_row("Rewritten", str(stats["rewritten"]))
    table.add_row("Unchanged", str(stats["unchanged"]))
    table.add_row("Failed", str(stats["failed"]))
    table.add_row("Hunks applied", str(stats["hunks_applied"]))
    return table
