"""Configuration parsing from ``.shardkit.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

CONFIG_FILENAME = ".shardkit.yml"

AUTO_SHARDS = "auto"

DEFAULT_MAX_SHARDS = 100
"""Ceiling for explicit shard counts (0 disables the check)."""

ALGORITHM_ALIASES: dict[str, str] = {
    "round-robin": "round-robin",
    "test-file-count": "round-robin",
    "complexity": "complexity",
    "bin-packing": "complexity",
}
"""Accepted algorithm names mapped to their canonical name."""


class ConfigError(ValueError):
    """Raised when sharding configuration is missing or invalid."""


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class ShardingConfig:
    """Sharding configuration."""

    shards: int | str = AUTO_SHARDS
    """Explicit shard count, or ``"auto"`` to derive it from the file count."""

    algorithm: str = "round-robin"
    """Partitioning algorithm: round-robin or complexity."""

    max_shards: int = DEFAULT_MAX_SHARDS
    """Hard ceiling for explicit shard counts (0 = no ceiling)."""

    shard_number: int = 1
    """1-based index of the shard this run executes."""

    history_file: str = ""
    """Path to a JSON file with historical durations (empty = none)."""

    base_dir: str = ""
    """Directory test paths are resolved against (empty = project root)."""

    @property
    def auto(self) -> bool:
        """Return True when the shard count should be computed."""
        return isinstance(self.shards, str) and self.shards.strip().lower() == AUTO_SHARDS

    @property
    def uses_history(self) -> bool:
        """Return True when historical timing data was requested."""
        return bool(self.history_file)


@dataclass
class ShardkitConfig:
    """Complete configuration from ``.shardkit.yml``."""

    root: str
    """Project root directory."""

    sharding: ShardingConfig = field(default_factory=ShardingConfig)
    """Sharding configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML after environment expansion."""


def parse_shard_count(value: object, max_shards: int = DEFAULT_MAX_SHARDS) -> int:
    """Parse an explicit shard count.

    Raises:
        ConfigError: If the value is absent, non-numeric, non-positive, or
            above *max_shards* (when *max_shards* is positive).
    """
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        msg = "shard count must be a positive integer (got nothing)"
        raise ConfigError(msg)
    try:
        count = int(str(value).strip())
    except ValueError:
        msg = f"shard count must be a positive integer (got: {value!r})"
        raise ConfigError(msg) from None
    if count < 1:
        msg = f"shard count must be a positive integer (got: {count})"
        raise ConfigError(msg)
    if max_shards > 0 and count > max_shards:
        msg = f"shard count must not exceed {max_shards} (got: {count})"
        raise ConfigError(msg)
    return count


def canonical_algorithm(name: str) -> str:
    """Return the canonical algorithm name for *name*.

    Raises:
        ConfigError: If the algorithm is unknown.
    """
    key = name.strip().lower()
    if key not in ALGORITHM_ALIASES:
        known = ", ".join(sorted(ALGORITHM_ALIASES))
        msg = f"Unknown algorithm: {name!r} (expected one of: {known})"
        raise ConfigError(msg)
    return ALGORITHM_ALIASES[key]


def _parse_int(section: dict[str, Any], key: str, default: int) -> int:
    """Read an integer setting from the sharding section.

    An unset ${VAR} expands to "", which means the default.

    Raises:
        ConfigError: If the value is not an integer.
    """
    value = section.get(key, default)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        msg = f"sharding.{key} must be an integer (got: {value!r})"
        raise ConfigError(msg)
    try:
        return int(str(value).strip())
    except ValueError:
        msg = f"sharding.{key} must be an integer (got: {value!r})"
        raise ConfigError(msg) from None


def _parse_sharding_config(raw: dict[str, Any]) -> ShardingConfig:
    """Parse sharding configuration from raw YAML."""
    sharding_raw = raw.get("sharding", {})
    if not isinstance(sharding_raw, dict):
        sharding_raw = {}

    shards = sharding_raw.get("shards", AUTO_SHARDS)
    if not isinstance(shards, int | str) or isinstance(shards, bool):
        shards = str(shards)

    return ShardingConfig(
        shards=shards,
        algorithm=str(sharding_raw.get("algorithm", "round-robin")),
        max_shards=_parse_int(sharding_raw, "max_shards", DEFAULT_MAX_SHARDS),
        shard_number=_parse_int(sharding_raw, "shard_number", 1),
        history_file=str(sharding_raw.get("history_file", "") or ""),
        base_dir=str(sharding_raw.get("base_dir", "") or ""),
    )


def load_config(root: str | Path) -> ShardkitConfig:
    """Load and parse ``.shardkit.yml``.

    Falls back to defaults when the YAML file is missing or incomplete.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        else:
            logger.warning("Ignoring %s: top level is not a mapping", config_file)

    sharding = _parse_sharding_config(raw)
    if not sharding.base_dir:
        sharding.base_dir = str(root_path)

    return ShardkitConfig(root=str(root_path), sharding=sharding, raw=raw)


def validate_config(config: ShardingConfig) -> list[str]:
    """Validate the sharding configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if not config.auto:
        try:
            parse_shard_count(config.shards, config.max_shards)
        except ConfigError as e:
            errors.append(f"sharding.shards: {e}")

    try:
        canonical_algorithm(config.algorithm)
    except ConfigError as e:
        errors.append(f"sharding.algorithm: {e}")

    if config.max_shards < 0:
        errors.append(f"sharding.max_shards must be non-negative (got: {config.max_shards})")

    if config.shard_number < 1:
        errors.append(f"sharding.shard_number must be >= 1 (got: {config.shard_number})")

    return errors
