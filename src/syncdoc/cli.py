"""Click-based CLI for syncdoc."""

from __future__ import annotations

import logging
import sys
import tomllib
from pathlib import Path

import click
from rich.console import Console

from syncdoc import __version__
from syncdoc.config import SyncdocConfig, load_config

logger = logging.getLogger("syncdoc")


def _load_or_fail(
    config_path: Path | None,
    overrides: dict[str, str] | None,
) -> SyncdocConfig:
    try:
        return load_config(config_path=config_path, cli_overrides=overrides)
    except (TypeError, tomllib.TOMLDecodeError) as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc


@click.group()
@click.version_option(version=__version__, prog_name="syncdoc")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to project config TOML file (default: ./syncdoc.toml).",
)
@click.option(
    "--set",
    "set_kv",
    nargs=2,
    multiple=True,
    metavar="KEY VALUE",
    help="Override a config value (dot notation, repeatable).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose output.")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Suppress all output.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    set_kv: tuple[tuple[str, str], ...],
    verbose: bool,
    quiet: bool,
) -> None:
    """syncdoc -- merge documentation rewrites into Rust sources, keeping their formatting."""
    ctx.ensure_object(dict)
    cfg = _load_or_fail(config_path, dict(set_kv) if set_kv else None)
    ctx.obj = {
        "config": cfg,
        "verbose": verbose,
        "quiet": quiet,
    }

    # Configure logging
    level = logging.getLevelName(cfg.general.log_level.upper())
    if not isinstance(level, int):
        raise click.BadParameter(
            f"Unknown log level {cfg.general.log_level!r}", param_hint="general.log_level"
        )
    if verbose:
        level = logging.DEBUG
    if quiet:
        level = logging.CRITICAL
    logging.basicConfig(level=level, format="%(name)s: %(message)s", stream=sys.stderr)


def _merge_single(
    ctx: click.Context,
    direction_name: str,
    original: Path,
    transformed: Path,
    output_path: Path | None,
    in_place: bool,
    show_diff: bool,
) -> None:
    """Shared body of the migrate and restore commands."""
    from syncdoc.formatter import MergeError
    from syncdoc.merge import DocMerger, MergeDirection
    from syncdoc.output import generate_diff

    if in_place and output_path is not None:
        raise click.UsageError("--in-place and --output are mutually exclusive")

    obj = ctx.obj
    config: SyncdocConfig = obj["config"]
    direction = MergeDirection(direction_name)

    original_text = original.read_text(encoding="utf-8")
    transformed_text = transformed.read_text(encoding="utf-8")

    merger = DocMerger.from_config(config, logger=logging.getLogger("syncdoc.merge"))
    try:
        plan = merger.plan(original_text, transformed_text, direction)
        merged = merger.apply_plan(plan)
    except MergeError as exc:
        raise click.ClickException(f"{direction.value} failed for {original}: {exc}") from exc

    logger.info(
        "%s: %d of %d hunk(s) applied", original, plan.applied_count, len(plan.split)
    )

    if show_diff:
        click.echo(generate_diff(original_text, merged, original.as_posix()), nl=False)

    destination = original if in_place else output_path
    if destination is not None:
        destination.write_text(merged, encoding="utf-8")
        if not obj["quiet"]:
            Console(stderr=True).print(f"Wrote {destination}")
    elif not show_diff:
        click.echo(merged, nl=False)


@main.command()
@click.argument("original", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("transformed", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", "output_path", type=click.Path(path_type=Path), default=None)
@click.option("--in-place", is_flag=True, default=False, help="Overwrite ORIGINAL.")
@click.option("--diff", "show_diff", is_flag=True, default=False, help="Print a unified diff.")
@click.pass_context
def migrate(
    ctx: click.Context,
    original: Path,
    transformed: Path,
    output_path: Path | None,
    in_place: bool,
    show_diff: bool,
) -> None:
    """Apply the doc changes of TRANSFORMED (docs moved out) to ORIGINAL."""
    _merge_single(ctx, "migrate", original, transformed, output_path, in_place, show_diff)


@main.command()
@click.argument("original", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("transformed", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", "output_path", type=click.Path(path_type=Path), default=None)
@click.option("--in-place", is_flag=True, default=False, help="Overwrite ORIGINAL.")
@click.option("--diff", "show_diff", is_flag=True, default=False, help="Print a unified diff.")
@click.pass_context
def restore(
    ctx: click.Context,
    original: Path,
    transformed: Path,
    output_path: Path | None,
    in_place: bool,
    show_diff: bool,
) -> None:
    """Apply the doc changes of TRANSFORMED (docs inlined again) to ORIGINAL."""
    _merge_single(ctx, "restore", original, transformed, output_path, in_place, show_diff)


@main.command()
@click.argument("original_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("transformed_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--restore", "restore_mode", is_flag=True, default=False, help="Restore direction.")
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write merged files here instead of in place.",
)
@click.option("-n", "--dry-run", is_flag=True, default=False, help="Do not write any file.")
@click.option("--report", type=click.Path(path_type=Path), default=None, help="Write report file.")
@click.option(
    "--output-format",
    type=click.Choice(["json", "text"]),
    default="json",
    help="Report format.",
)
@click.pass_context
def batch(
    ctx: click.Context,
    original_dir: Path,
    transformed_dir: Path,
    restore_mode: bool,
    output_dir: Path | None,
    dry_run: bool,
    report: Path | None,
    output_format: str,
) -> None:
    """Merge every source file under ORIGINAL_DIR with its twin in TRANSFORMED_DIR."""
    from syncdoc.merge import MergeDirection
    from syncdoc.output import ReportFormatter
    from syncdoc.pipeline import MergePipeline, discover_jobs
    from syncdoc.progress import ProgressReporter

    obj = ctx.obj
    config: SyncdocConfig = obj["config"]
    console = Console(stderr=True, quiet=obj["quiet"])
    reporter = ProgressReporter(console, verbose=obj["verbose"], quiet=obj["quiet"])

    direction = MergeDirection.RESTORE if restore_mode else MergeDirection.MIGRATE
    jobs = discover_jobs(original_dir, transformed_dir, output_dir, config.batch.extensions)
    if not jobs:
        raise click.BadParameter(
            f"No files matching {', '.join(config.batch.extensions)} in {original_dir}",
            param_hint="ORIGINAL_DIR",
        )

    pipeline = MergePipeline(config)
    reporter.start(total_files=len(jobs))
    result = pipeline.run(
        jobs, direction, progress_callback=reporter.callback, dry_run=dry_run
    )
    reporter.finish(result)

    if dry_run:
        for file_result in result.files:
            if file_result.diff:
                click.echo(file_result.diff, nl=False)

    if report is not None:
        ReportFormatter().write(result, report, output_format, config=config)
        click.echo(f"Report: {report}")

    if result.failed:
        ctx.exit(1)


@main.command()
@click.argument("original", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("transformed", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--restore", "restore_mode", is_flag=True, default=False, help="Restore direction.")
@click.pass_context
def hunks(
    ctx: click.Context,
    original: Path,
    transformed: Path,
    restore_mode: bool,
) -> None:
    """Show how a merge would treat each diff hunk, without writing."""
    from rich.table import Table

    from syncdoc.formatter import MergeError
    from syncdoc.merge import DocMerger, MergeDirection

    obj = ctx.obj
    config: SyncdocConfig = obj["config"]
    console = Console(quiet=obj["quiet"])

    direction = MergeDirection.RESTORE if restore_mode else MergeDirection.MIGRATE
    merger = DocMerger.from_config(config)
    try:
        plan = merger.plan(
            original.read_text(encoding="utf-8"),
            transformed.read_text(encoding="utf-8"),
            direction,
        )
    except MergeError as exc:
        raise click.ClickException(str(exc)) from exc

    table = Table(title=f"Hunks ({direction.value})", show_header=True)
    table.add_column("#", style="dim")
    table.add_column("Range", style="cyan")
    table.add_column("Level", style="blue")
    table.add_column("Applied", style="green")

    for i, (hunk, relevant, module_level) in enumerate(
        zip(plan.split, plan.relevant, plan.module_level, strict=True)
    ):
        table.add_row(
            str(i),
            hunk.describe(),
            "module" if module_level else "item",
            "yes" if relevant else "[red]no[/red]",
        )

    console.print(table)
    console.print(
        f"{len(plan.hunks)} raw hunk(s), {len(plan.split)} after splitting, "
        f"{plan.applied_count} applied"
    )


@main.command(name="config")
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Show the resolved syncdoc configuration."""
    import json as json_mod

    from rich.syntax import Syntax

    obj = ctx.obj
    config: SyncdocConfig = obj["config"]
    console = Console(quiet=obj["quiet"])

    json_str = json_mod.dumps(config.to_dict(), indent=2)
    syntax = Syntax(json_str, "json", theme="monokai")
    console.print(syntax)
