"""shardkit — balance test files across parallel CI shards."""

__version__ = "0.1.0"
