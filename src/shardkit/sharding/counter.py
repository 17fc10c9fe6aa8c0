"""Recommended shard count for a test suite size."""

from __future__ import annotations

import math

MAX_AUTO_SHARDS = 10
_SMALL_SUITE = 5
_MEDIUM_SUITE = 20
_FILES_PER_SHARD_MEDIUM = 5
_FILES_PER_SHARD_LARGE = 10


def recommend_shard_count(file_count: int) -> int:
    """Recommend a shard count for *file_count* test files.

    Up to 5 files run in one shard, up to 20 files get one shard per 5
    files, and larger suites get one shard per 10 files, capped at
    ``MAX_AUTO_SHARDS``.
    """
    if file_count <= _SMALL_SUITE:
        return 1
    if file_count <= _MEDIUM_SUITE:
        return math.ceil(file_count / _FILES_PER_SHARD_MEDIUM)
    return min(math.ceil(file_count / _FILES_PER_SHARD_LARGE), MAX_AUTO_SHARDS)
