"""Batch orchestrator: merge many original/transformed file pairs."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from syncdoc.formatter import MergeError
from syncdoc.merge import DocMerger, MergeDirection
from syncdoc.models.results import BatchResult, FileResult, FileStatus
from syncdoc.output import generate_diff
from syncdoc.progress import PipelineEvent

if TYPE_CHECKING:
    from syncdoc.config import SyncdocConfig

logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    """Stages of a batch run."""

    DISCOVERING = "DISCOVERING"
    MERGING = "MERGING"
    WRITING = "WRITING"
    COMPLETE = "COMPLETE"


@dataclass(frozen=True, slots=True)
class FileJob:
    """One file pair to merge.

    Args:
        original_path: File whose formatting is kept.
        transformed_path: Same file after the doc transform.
        output_path: Where the merged text goes; may equal ``original_path``.
        relative_path: Path used in reports and diffs.
    """

    original_path: Path
    transformed_path: Path
    output_path: Path
    relative_path: str = ""

    @property
    def display_path(self) -> str:
        return self.relative_path or str(self.original_path)


def discover_jobs(
    original_root: Path,
    transformed_root: Path,
    output_root: Path | None = None,
    extensions: Iterable[str] = (".rs",),
) -> list[FileJob]:
    """Pair every source file under ``original_root`` with its transformed twin.

    Files are matched by relative path. A missing twin is not an error here:
    the job is still returned and fails individually when run.

    Args:
        original_root: Directory of original sources.
        transformed_root: Directory mirroring it with transformed sources.
        output_root: Directory for merged output; None writes in place.
        extensions: File suffixes to include.

    Returns:
        Jobs sorted by relative path.
    """
    suffixes = tuple(extensions)
    jobs: list[FileJob] = []
    for path in sorted(original_root.rglob("*")):
        if not path.is_file() or not path.name.endswith(suffixes):
            continue
        rel = path.relative_to(original_root)
        out_root = output_root if output_root is not None else original_root
        jobs.append(
            FileJob(
                original_path=path,
                transformed_path=transformed_root / rel,
                output_path=out_root / rel,
                relative_path=rel.as_posix(),
            )
        )
    logger.debug("Discovered %d file(s) under %s", len(jobs), original_root)
    return jobs


class MergePipeline:
    """Runs the merge engine over a batch of files in parallel.

    Each file is an isolated unit: formatter or I/O failures produce a failed
    result for that file and the rest of the batch continues, unless
    ``batch.fail_fast`` is set.

    Args:
        config: Fully resolved configuration.
        merger: Merge engine; built from ``config`` when omitted.
    """

    def __init__(self, config: SyncdocConfig, merger: DocMerger | None = None) -> None:
        self._config = config
        self._merger = merger or DocMerger.from_config(config)

    def run(
        self,
        jobs: Sequence[FileJob],
        direction: MergeDirection,
        progress_callback: Callable[[PipelineEvent], None] | None = None,
        dry_run: bool = False,
    ) -> BatchResult:
        """Merge every job and write (or, in a dry run, diff) the results.

        Args:
            jobs: File pairs to merge.
            direction: Migrate or restore.
            progress_callback: Optional callback for progress events.
            dry_run: Compute merges and diffs without writing anything.

        Returns:
            BatchResult with one FileResult per job that was run, in job order.
        """
        total = len(jobs)
        self._emit(
            progress_callback,
            PipelineState.DISCOVERING,
            None,
            0,
            total,
            f"{total} file(s) to {direction.value}",
        )

        outcomes: dict[int, tuple[FileResult, str | None]] = {}
        fail_fast = self._config.batch.fail_fast

        with ThreadPoolExecutor(max_workers=max(1, self._config.general.max_workers)) as executor:
            futures = {
                executor.submit(self.merge_job, job, direction, dry_run): i
                for i, job in enumerate(jobs)
            }
            stopped = False
            done = 0
            for future in as_completed(futures):
                if future.cancelled():
                    continue
                i = futures[future]
                outcomes[i] = future.result()
                result = outcomes[i][0]
                self._emit(
                    progress_callback,
                    PipelineState.MERGING,
                    result.path,
                    done,
                    total,
                    f"{result.path}: {result.status.value}",
                )
                done += 1
                if result.status is FileStatus.FAILED and fail_fast and not stopped:
                    stopped = True
                    cancelled = sum(1 for f in futures if f.cancel())
                    logger.warning(
                        "Stopping after failure in %s; %d file(s) not run", result.path, cancelled
                    )

        batch = BatchResult(direction=direction.value, dry_run=dry_run)
        for i in sorted(outcomes):
            result, merged = outcomes[i]
            if merged is not None and not dry_run:
                self._emit(
                    progress_callback,
                    PipelineState.WRITING,
                    result.path,
                    i,
                    total,
                    f"Writing {jobs[i].output_path}",
                )
                result = self._write(jobs[i], result, merged)
            batch.files.append(result)

        self._emit(
            progress_callback,
            PipelineState.COMPLETE,
            None,
            max(total - 1, 0),
            total,
            f"{batch.rewritten} rewritten, {batch.unchanged} unchanged, {batch.failed} failed",
        )
        return batch

    def merge_job(
        self,
        job: FileJob,
        direction: MergeDirection,
        dry_run: bool = False,
    ) -> tuple[FileResult, str | None]:
        """Merge one job without writing.

        Returns:
            The file result and the text to write, or None when nothing
            needs writing (failure, or unchanged and written in place).
        """
        path = job.display_path
        if not job.transformed_path.is_file():
            return (
                FileResult(
                    path=path,
                    status=FileStatus.FAILED,
                    error=f"no transformed counterpart at {job.transformed_path}",
                ),
                None,
            )

        try:
            original = job.original_path.read_text(encoding="utf-8")
            transformed = job.transformed_path.read_text(encoding="utf-8")
            plan = self._merger.plan(original, transformed, direction)
            merged = self._merger.apply_plan(plan)
        except (MergeError, OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to %s %s: %s", direction.value, path, exc)
            return FileResult(path=path, status=FileStatus.FAILED, error=str(exc)), None

        changed = merged != original
        result = FileResult(
            path=path,
            status=FileStatus.REWRITTEN if changed else FileStatus.UNCHANGED,
            hunks_total=len(plan.split),
            hunks_applied=plan.applied_count,
            output_path=str(job.output_path),
            diff=generate_diff(original, merged, path) if dry_run and changed else "",
        )
        logger.debug(
            "%s: %s (%d/%d hunks)", path, result.status.value, plan.applied_count, len(plan.split)
        )

        if not changed and job.output_path == job.original_path:
            return result, None
        return result, merged

    @staticmethod
    def _write(job: FileJob, result: FileResult, merged: str) -> FileResult:
        try:
            job.output_path.parent.mkdir(parents=True, exist_ok=True)
            job.output_path.write_text(merged, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write %s: %s", job.output_path, exc)
            return FileResult(path=result.path, status=FileStatus.FAILED, error=str(exc))
        return result

    @staticmethod
    def _emit(
        callback: Callable[[PipelineEvent], None] | None,
        state: PipelineState,
        path: str | None,
        index: int,
        total: int,
        detail: str,
    ) -> None:
        """Emit a progress event if a callback is registered."""
        if callback is not None:
            callback(
                PipelineEvent(
                    state=state.value,
                    path=path,
                    file_index=index,
                    total_files=total,
                    detail=detail,
                )
            )
