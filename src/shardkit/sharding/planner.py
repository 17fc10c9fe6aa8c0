"""Shard planning: shard count, algorithm selection, weights and narration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shardkit.config import canonical_algorithm, parse_shard_count
from shardkit.sharding.complexity import assess_complexity
from shardkit.sharding.counter import recommend_shard_count
from shardkit.sharding.history import resolve_weight
from shardkit.sharding.splitter import Shard, split_by_weight, split_round_robin

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from shardkit.config import ShardingConfig
    from shardkit.sharding.history import HistoricalData

logger = logging.getLogger(__name__)


@dataclass
class ShardPlan:
    """Result of a planning run."""

    shards: list[Shard] = field(default_factory=list)
    """Shards in index order."""

    algorithm: str = "round-robin"
    """Canonical name of the algorithm used."""

    requested_shards: int = 1
    """Shard count requested before capping at the file count."""

    shard_number: int = 1
    """1-based shard selected for this run, after clamping."""

    weighted: bool = False
    """True when shard weights are meaningful (complexity algorithm)."""

    historical_files: int = 0
    """Number of files weighted by recorded durations."""

    diagnostics: list[str] = field(default_factory=list)
    """Human-readable narration of the plan."""

    @property
    def total_shards(self) -> int:
        return len(self.shards)

    @property
    def shard_files(self) -> list[list[str]]:
        return [shard.files for shard in self.shards]

    @property
    def selected_files(self) -> list[str]:
        """Files of the selected shard."""
        if not self.shards:
            return []
        return self.shards[self.shard_number - 1].files

    @property
    def shard_matrix(self) -> list[int]:
        """1-based shard indices, suitable for a CI job matrix."""
        return list(range(1, self.total_shards + 1))


def normalize_files(paths: Iterable[str]) -> list[str]:
    """Deduplicate and lexically sort test file paths, dropping blanks."""
    return sorted({p.strip() for p in paths if p and p.strip()})


def resolve_shard_count(config: ShardingConfig, file_count: int) -> int:
    """Return the requested shard count for *file_count* files.

    Raises:
        ConfigError: If an explicit count is missing or invalid.
    """
    if config.auto:
        count = recommend_shard_count(file_count)
        logger.info("Auto-shard mode: calculated %d shard(s) for %d test files", count, file_count)
        return count
    return parse_shard_count(config.shards, config.max_shards)


def _clamp_shard_number(shard_number: int, total: int) -> int:
    return min(max(shard_number, 1), max(total, 1))


def _format_weight(weight: float, *, historical: bool) -> str:
    if historical:
        return f"estimated time: {weight:.1f}s"
    return f"complexity score: {weight:g}"


class _Narrator:
    """Collects diagnostic lines and mirrors them to the log."""

    def __init__(self, diagnostics: list[str]) -> None:
        self._lines = diagnostics

    def info(self, line: str) -> None:
        self._lines.append(line)
        logger.info("%s", line)

    def warning(self, line: str) -> None:
        self._lines.append(f"Warning: {line}")
        logger.warning("%s", line)


def plan_shards(
    files: Sequence[str],
    config: ShardingConfig,
    history: HistoricalData | None = None,
) -> ShardPlan:
    """Assign test files to shards.

    1. Resolve the shard count (auto-computed or explicit).
    2. Empty input short-circuits to a single empty shard.
    3. Resolve the algorithm by name.
    4. Weigh files by recorded duration, falling back to complexity score
       (complexity algorithm only).
    5. Split, select the current shard (clamped into range), and narrate.

    Args:
        files: Deduplicated, sorted test file paths.
        config: Sharding configuration.
        history: Validated historical durations, or None.

    Returns:
        ShardPlan with shards, the selected shard, and diagnostics.

    Raises:
        ConfigError: If the shard count or algorithm is invalid.
    """
    plan = ShardPlan()
    narrator = _Narrator(plan.diagnostics)

    plan.requested_shards = resolve_shard_count(config, len(files))

    if not files:
        narrator.warning("No test files found. This may indicate a misconfigured test pattern.")
        plan.shards = [Shard(index=1)]
        plan.algorithm = config.algorithm
        return plan

    plan.algorithm = canonical_algorithm(config.algorithm)
    narrator.info(
        f"Using {plan.algorithm} algorithm to distribute {len(files)} test file(s) "
        f"across {plan.requested_shards} shard(s)"
    )

    if plan.algorithm == "complexity":
        plan.weighted = True
        base_dir = config.base_dir or None

        def weigh(path: str) -> float:
            if history is not None and path in history:
                plan.historical_files += 1
                return resolve_weight(path, history, 1)
            assessment = assess_complexity(path, base_dir)
            if assessment.degraded:
                narrator.warning(
                    f"Could not analyze {path} ({assessment.degraded_reason}); "
                    "using path-based score"
                )
            return resolve_weight(path, history, assessment.score)

        plan.shards = split_by_weight(files, plan.requested_shards, weigh)
        if history is not None:
            narrator.info(
                f"Historical timing available for {plan.historical_files} of "
                f"{len(files)} test file(s)"
            )
    else:
        plan.shards = split_round_robin(files, plan.requested_shards)

    plan.shard_number = _clamp_shard_number(config.shard_number, plan.total_shards)
    _narrate(plan, narrator, historical=plan.historical_files > 0)
    return plan


def _narrate(plan: ShardPlan, narrator: _Narrator, *, historical: bool) -> None:
    narrator.info(f"Total shards: {plan.total_shards}")
    narrator.info("Shard distribution:")
    for shard in plan.shards:
        line = f"  Shard {shard.index}: {len(shard.files)} test file(s)"
        if plan.weighted:
            line += f", {_format_weight(shard.weight, historical=historical)}"
        narrator.info(line)
        for file in shard.files:
            narrator.info(f"    - {file}")
    narrator.info(f"Current shard: {plan.shard_number}")
    narrator.info(f"Test files in this shard: {len(plan.selected_files)}")
