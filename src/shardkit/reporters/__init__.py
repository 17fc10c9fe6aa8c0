"""Reporters for outputting shard plans."""

from __future__ import annotations

from shardkit.reporters.terminal import reporter

__all__ = ["reporter"]
