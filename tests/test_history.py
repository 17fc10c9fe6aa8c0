"""Tests for shardkit.sharding.history."""

from __future__ import annotations

import json
import math
from pathlib import Path

from shardkit.sharding.history import filter_historical_data, load_historical_data, resolve_weight


class TestResolveWeight:
    def test_recorded_value_returned_verbatim(self) -> None:
        history = {"t.scala": 50.5}
        assert resolve_weight("t.scala", history, 10) == 50.5

    def test_missing_entry_falls_back(self) -> None:
        history = {"t.scala": 50.5}
        assert resolve_weight("other.scala", history, 10) == 10

    def test_no_history_falls_back(self) -> None:
        assert resolve_weight("t.scala", None, 10) == 10

    def test_empty_history_falls_back(self) -> None:
        assert resolve_weight("t.scala", {}, 3) == 3

    def test_non_finite_value_falls_back(self) -> None:
        assert resolve_weight("t.scala", {"t.scala": math.inf}, 2) == 2


class TestFilterHistoricalData:
    def test_keeps_positive_numbers(self) -> None:
        assert filter_historical_data({"a": 1, "b": 2.5}) == {"a": 1.0, "b": 2.5}

    def test_drops_invalid_durations(self) -> None:
        raw = {
            "zero": 0,
            "negative": -3.0,
            "text": "12",
            "none": None,
            "flag": True,
            "nan": float("nan"),
            "inf": float("inf"),
            "ok": 4.0,
        }
        assert filter_historical_data(raw) == {"ok": 4.0}

    def test_drops_non_string_keys(self) -> None:
        assert filter_historical_data({1: 2.0, "": 3.0, "x": 1.0}) == {"x": 1.0}

    def test_accepts_nested_duration(self) -> None:
        raw = {"a": {"duration": 7.5}, "b": {"duration": -1}, "c": {"runs": 3}}
        assert filter_historical_data(raw) == {"a": 7.5}


class TestLoadHistoricalData:
    def test_loads_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "timings.json"
        path.write_text(json.dumps({"a.scala": 12.0, "b.scala": "bad"}), encoding="utf-8")
        assert load_historical_data(path) == {"a.scala": 12.0}

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_historical_data(tmp_path / "missing.json") == {}

    def test_invalid_json_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "timings.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_historical_data(path) == {}

    def test_non_object_root_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "timings.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_historical_data(path) == {}
