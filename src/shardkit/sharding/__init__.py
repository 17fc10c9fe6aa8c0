"""Test sharding support for parallel CI execution."""

from shardkit.sharding.complexity import (
    ComplexityScore,
    ContentRead,
    assess_complexity,
    estimate_complexity,
)
from shardkit.sharding.counter import recommend_shard_count
from shardkit.sharding.history import filter_historical_data, load_historical_data, resolve_weight
from shardkit.sharding.plan_result import read_shard_plan, write_shard_plan
from shardkit.sharding.planner import ShardPlan, normalize_files, plan_shards
from shardkit.sharding.splitter import Shard, split_by_weight, split_round_robin

__all__ = [
    "ComplexityScore",
    "ContentRead",
    "Shard",
    "ShardPlan",
    "assess_complexity",
    "estimate_complexity",
    "filter_historical_data",
    "load_historical_data",
    "normalize_files",
    "plan_shards",
    "read_shard_plan",
    "recommend_shard_count",
    "resolve_weight",
    "split_by_weight",
    "split_round_robin",
    "write_shard_plan",
]
