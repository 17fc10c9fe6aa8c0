"""Historical execution times as shard weights.

Timing data is validated once, when it is loaded, so that lookups can
trust every recorded value to be a positive finite number of seconds.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

HistoricalData = Mapping[str, float]
"""Mapping of test file path to observed duration in seconds."""


def _coerce_duration(value: Any) -> float | None:
    """Return *value* as a positive finite float, or None if invalid."""
    if isinstance(value, dict):
        value = value.get("duration")
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    duration = float(value)
    if not math.isfinite(duration) or duration <= 0:
        return None
    return duration


def filter_historical_data(raw: Mapping[Any, Any]) -> dict[str, float]:
    """Drop malformed entries from raw timing data.

    Accepts ``{path: seconds}`` and ``{path: {"duration": seconds}}``.
    Non-string keys and durations that are non-numeric, non-finite or
    not positive are discarded.
    """
    cleaned: dict[str, float] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            logger.debug("Dropping historical entry with invalid key: %r", key)
            continue
        duration = _coerce_duration(value)
        if duration is None:
            logger.debug("Dropping invalid historical duration for %s: %r", key, value)
            continue
        cleaned[key] = duration
    return cleaned


def load_historical_data(path: Path) -> dict[str, float]:
    """Load and validate historical timing data from a JSON file.

    A missing or malformed file yields an empty mapping; planning then
    falls back to complexity scores for every file.
    """
    if not path.is_file():
        logger.warning("Historical timing file not found: %s", path)
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to load historical timing data from %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring historical timing data in %s: expected a JSON object", path)
        return {}

    cleaned = filter_historical_data(data)
    logger.info("Loaded %d historical timing entries from %s", len(cleaned), path)
    return cleaned


def resolve_weight(
    path: str,
    history: HistoricalData | None,
    complexity_score: float,
) -> float:
    """Return the recorded duration for *path*, else *complexity_score*."""
    if history is not None:
        recorded = history.get(path)
        if recorded is not None and math.isfinite(recorded):
            return recorded
    return complexity_score
