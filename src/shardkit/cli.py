"""shardkit CLI — top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import IO, Any

import click
import yaml
from rich.console import Console

from shardkit import __version__
from shardkit.config import ConfigError, ShardingConfig, load_config, validate_config
from shardkit.reporters.terminal import reporter
from shardkit.sharding.counter import recommend_shard_count
from shardkit.sharding.history import load_historical_data
from shardkit.sharding.plan_result import serialize_shard_plan, write_shard_plan
from shardkit.sharding.planner import ShardPlan, normalize_files, plan_shards

logger = logging.getLogger(__name__)
console = Console()

_WARNING_PREFIX = "Warning: "


def _read_file_list(files: tuple[str, ...], files_from: IO[str] | None) -> list[str]:
    """Collect test file paths from arguments and an optional list file."""
    paths = list(files)
    if files_from is not None:
        for line in files_from.read().splitlines():
            paths.extend(part for part in line.split(",") if part.strip())
    return normalize_files(paths)


def _apply_overrides(sharding: ShardingConfig, overrides: dict[str, Any]) -> ShardingConfig:
    """Apply non-None CLI options on top of file configuration."""
    for key, value in overrides.items():
        if value is not None:
            setattr(sharding, key, value)
    return sharding


def _resolve_history_path(root: Path, history_file: str) -> Path:
    path = Path(history_file)
    return path if path.is_absolute() else root / path


def _display_plan_console(plan: ShardPlan) -> None:
    """Display a shard plan in rich console format."""
    for line in plan.diagnostics:
        if line.startswith(_WARNING_PREFIX):
            reporter.print_warning(line.removeprefix(_WARNING_PREFIX))
    reporter.print_info(
        f"Using {plan.algorithm} across {plan.total_shards} shard(s) "
        f"(requested {plan.requested_shards})"
    )
    if plan.weighted and plan.historical_files:
        reporter.print_info(f"Historical timing used for {plan.historical_files} file(s)")
    reporter.print_shard_plan(plan)


def _display_plan_json(plan: ShardPlan) -> None:
    """Display a shard plan in JSON format for CI mode."""
    click.echo(json.dumps(serialize_shard_plan(plan), indent=2))


@click.group()
@click.option(
    "--ci",
    is_flag=True,
    help="CI mode: machine-readable JSON output, non-interactive.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="shardkit")
@click.pass_context
def cli(ctx: click.Context, *, ci: bool, verbose: bool) -> None:
    """shardkit — balance test files across parallel CI shards."""
    ctx.ensure_object(dict)
    ctx.obj["ci"] = ci
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("files", nargs=-1)
@click.option(
    "--files-from",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Read test file paths (one per line or comma-separated) from a file, or '-' for stdin.",
)
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
@click.option("--shards", type=str, default=None, help="Number of shards, or 'auto'.")
@click.option(
    "--max-shards",
    type=click.IntRange(min=0),
    default=None,
    help="Ceiling for explicit shard counts (0 = no ceiling).",
)
@click.option(
    "--algorithm",
    type=str,
    default=None,
    help="Partitioning algorithm: round-robin or complexity.",
)
@click.option(
    "--shard-number",
    type=click.IntRange(min=1),
    default=None,
    envvar="GITHUB_SHARD",
    help="1-based shard to select (falls back to $GITHUB_SHARD).",
)
@click.option(
    "--history",
    "history_file",
    type=str,
    default=None,
    help="JSON file with historical test durations in seconds.",
)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory test paths are resolved against (default: project root).",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to write the shard plan JSON.",
)
def plan(**kwargs: Any) -> None:
    """Distribute test files across shards.

    Test file paths come from FILES and/or --files-from. Explicit options
    override values from `.shardkit.yml`.
    """
    ctx = click.get_current_context()
    ci_mode = ctx.obj.get("ci", False) if ctx.obj else False

    root = Path(kwargs["path"])
    try:
        config = load_config(root)
    except (ConfigError, OSError, yaml.YAMLError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    sharding = _apply_overrides(
        config.sharding,
        {
            "shards": kwargs.get("shards"),
            "max_shards": kwargs.get("max_shards"),
            "algorithm": kwargs.get("algorithm"),
            "shard_number": kwargs.get("shard_number"),
            "history_file": kwargs.get("history_file"),
            "base_dir": kwargs.get("base_dir"),
        },
    )

    files = _read_file_list(kwargs["files"], kwargs.get("files_from"))

    history = None
    if sharding.uses_history:
        history = load_historical_data(_resolve_history_path(root, sharding.history_file))

    if not ci_mode:
        reporter.print_header("shardkit plan")
        reporter.print_info(f"Found {len(files)} test files")

    try:
        result = plan_shards(files, sharding, history)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    output_path = kwargs.get("output_path")
    if output_path is not None:
        write_shard_plan(result, Path(output_path))
        if not ci_mode:
            reporter.print_info(f"Shard plan written to {output_path}")

    if ci_mode:
        _display_plan_json(result)
    else:
        _display_plan_console(result)


@cli.command()
@click.argument("file_count", type=click.IntRange(min=0))
def recommend(file_count: int) -> None:
    """Print the recommended shard count for FILE_COUNT test files."""
    click.echo(str(recommend_shard_count(file_count)))


@cli.group("config")
def config_group() -> None:
    """Inspect `.shardkit.yml` configuration."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
def config_show(path: str) -> None:
    """Show resolved sharding configuration and validation errors."""
    try:
        config = load_config(path)
    except (ConfigError, OSError, yaml.YAMLError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    console.print(
        yaml.safe_dump({"sharding": asdict(config.sharding)}, sort_keys=False),
        highlight=False,
        markup=False,
    )

    errors = validate_config(config.sharding)
    if errors:
        for error in errors:
            reporter.print_error(error)
        raise click.Abort

    reporter.print_success("Configuration is valid")


if __name__ == "__main__":
    cli()
