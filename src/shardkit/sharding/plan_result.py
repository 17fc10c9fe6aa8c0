"""Shard plan serialization for CI job outputs."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from shardkit.sharding.planner import ShardPlan
from shardkit.sharding.splitter import Shard

if TYPE_CHECKING:
    from pathlib import Path


def serialize_shard_plan(plan: ShardPlan) -> dict[str, Any]:
    """Convert a ShardPlan to a JSON-serializable dict."""
    return {
        "algorithm": plan.algorithm,
        "requested_shards": plan.requested_shards,
        "total_shards": plan.total_shards,
        "shard_number": plan.shard_number,
        "shard_matrix": plan.shard_matrix,
        "weighted": plan.weighted,
        "historical_files": plan.historical_files,
        "shards": [
            {"index": shard.index, "files": list(shard.files), "weight": shard.weight}
            for shard in plan.shards
        ],
        "selected_files": list(plan.selected_files),
        "diagnostics": list(plan.diagnostics),
    }


def write_shard_plan(plan: ShardPlan, output_path: Path) -> None:
    """Serialize and write a shard plan to a JSON file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(serialize_shard_plan(plan), indent=2), encoding="utf-8")


def read_shard_plan(path: Path) -> ShardPlan:
    """Read a shard plan JSON file written by ``write_shard_plan``."""
    data = json.loads(path.read_text(encoding="utf-8"))

    shards = [
        Shard(
            index=s["index"],
            files=list(s.get("files", [])),
            weight=float(s.get("weight", 0.0)),
        )
        for s in data.get("shards", [])
    ]

    return ShardPlan(
        shards=shards,
        algorithm=data.get("algorithm", "round-robin"),
        requested_shards=data.get("requested_shards", len(shards)),
        shard_number=data.get("shard_number", 1),
        weighted=data.get("weighted", False),
        historical_files=data.get("historical_files", 0),
        diagnostics=list(data.get("diagnostics", [])),
    )
