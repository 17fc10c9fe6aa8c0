"""Shard splitting: round-robin and weighted bin-packing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


@dataclass
class Shard:
    """One parallel execution group."""

    index: int
    """1-based shard index."""

    files: list[str] = field(default_factory=list)
    """Test files assigned to this shard, in assignment order."""

    weight: float = 0.0
    """Aggregate weight of the files (0 for round-robin shards)."""


def _validate_shard_count(shard_count: int) -> None:
    if shard_count < 1:
        msg = f"shard_count must be >= 1, got {shard_count}"
        raise ValueError(msg)


def split_round_robin(files: Sequence[str], shard_count: int) -> list[Shard]:
    """Cycle files across shards in input order, ignoring weight.

    Creates ``min(shard_count, len(files))`` shards; an empty file list
    yields no shards.

    Raises:
        ValueError: If shard_count is less than 1.
    """
    _validate_shard_count(shard_count)
    if not files:
        return []

    actual = min(shard_count, len(files))
    shards = [Shard(index=i + 1) for i in range(actual)]
    for i, file in enumerate(files):
        shards[i % actual].files.append(file)
    return shards


def split_by_weight(
    files: Sequence[str],
    shard_count: int,
    weigh: Callable[[str], float] | None = None,
) -> list[Shard]:
    """Greedy longest-processing-time bin-packing.

    Files are taken heaviest first (ties keep input order) and each goes
    to the shard with the lowest running weight, the lowest index winning
    ties. The heaviest shard ends up at most one file weight above the
    average shard weight.

    Args:
        files: Sorted list of test files.
        shard_count: Requested number of shards.
        weigh: Weight of a single file; every file weighs 1 when omitted.

    Returns:
        ``min(shard_count, len(files))`` shards with aggregate weights.

    Raises:
        ValueError: If shard_count is less than 1.
    """
    _validate_shard_count(shard_count)
    if not files:
        return []

    weighted = [(file, weigh(file) if weigh is not None else 1.0) for file in files]
    # Stable sort keeps input order for equal weights
    weighted.sort(key=lambda item: item[1], reverse=True)

    actual = min(shard_count, len(files))
    shards = [Shard(index=i + 1) for i in range(actual)]
    for file, weight in weighted:
        target = min(shards, key=lambda shard: shard.weight)
        target.files.append(file)
        target.weight += weight
    return shards
