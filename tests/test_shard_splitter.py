"""Tests for shardkit.sharding.splitter."""

from __future__ import annotations

import random

import pytest

from shardkit.sharding.splitter import split_by_weight, split_round_robin


class TestSplitRoundRobin:
    def test_scala_example(self) -> None:
        files = ["a/Test1.scala", "a/Test2.scala", "a/Test3.scala", "a/Test4.scala"]
        shards = split_round_robin(files, 2)
        assert [s.files for s in shards] == [
            ["a/Test1.scala", "a/Test3.scala"],
            ["a/Test2.scala", "a/Test4.scala"],
        ]
        assert [s.index for s in shards] == [1, 2]

    def test_three_shards_uneven(self) -> None:
        files = [str(i) for i in range(7)]
        shards = split_round_robin(files, 3)
        # Round-robin: 0,3,6 | 1,4 | 2,5
        assert [s.files for s in shards] == [["0", "3", "6"], ["1", "4"], ["2", "5"]]

    def test_caps_shards_at_file_count(self) -> None:
        shards = split_round_robin(["a", "b"], 5)
        assert len(shards) == 2
        assert all(s.files for s in shards)

    def test_empty_input_yields_no_shards(self) -> None:
        assert split_round_robin([], 4) == []

    def test_repeatable(self) -> None:
        files = [f"t{i}.scala" for i in range(23)]
        first = [s.files for s in split_round_robin(files, 4)]
        second = [s.files for s in split_round_robin(files, 4)]
        assert first == second

    def test_ignores_weight(self) -> None:
        shards = split_round_robin(["a", "b"], 2)
        assert all(s.weight == 0.0 for s in shards)

    def test_invalid_shard_count(self) -> None:
        with pytest.raises(ValueError, match="shard_count must be >= 1"):
            split_round_robin(["a"], 0)


class TestSplitByWeight:
    def test_heavy_and_light_files_separate(self) -> None:
        weights = {"PropertyTest.scala": 4, "Simple.scala": 1}
        shards = split_by_weight(["PropertyTest.scala", "Simple.scala"], 2, weights.__getitem__)
        assert [s.files for s in shards] == [["PropertyTest.scala"], ["Simple.scala"]]
        assert [s.weight for s in shards] == [4, 1]

    def test_heaviest_first_onto_lightest(self) -> None:
        weights = {"a": 5, "b": 4, "c": 3, "d": 3, "e": 1}
        shards = split_by_weight(list(weights), 2, weights.__getitem__)
        # a->1 (5), b->2 (4), c->2 (7), d->1 (8), e->2 (8)
        assert [s.files for s in shards] == [["a", "d"], ["b", "c", "e"]]
        assert [s.weight for s in shards] == [8, 8]

    def test_ties_go_to_lowest_index(self) -> None:
        shards = split_by_weight(["a", "b", "c"], 3, lambda _f: 2.0)
        assert [s.files for s in shards] == [["a"], ["b"], ["c"]]

    def test_equal_weights_keep_input_order(self) -> None:
        shards = split_by_weight(["a", "b", "c", "d"], 1, lambda _f: 1.0)
        assert shards[0].files == ["a", "b", "c", "d"]

    def test_default_weight_is_one(self) -> None:
        shards = split_by_weight(["a", "b", "c"], 2)
        assert [s.weight for s in shards] == [2.0, 1.0]

    def test_mixed_float_and_int_weights(self) -> None:
        weights: dict[str, float] = {"slow": 50.5, "x": 3, "y": 2}
        shards = split_by_weight(["slow", "x", "y"], 2, weights.__getitem__)
        assert shards[0].files == ["slow"]
        assert shards[1].files == ["x", "y"]
        assert shards[1].weight == 5

    def test_empty_input_yields_no_shards(self) -> None:
        assert split_by_weight([], 3, lambda _f: 1.0) == []

    def test_invalid_shard_count(self) -> None:
        with pytest.raises(ValueError, match="shard_count must be >= 1"):
            split_by_weight(["a"], -1)

    @pytest.mark.parametrize("seed", range(20))
    def test_max_shard_within_bin_packing_bound(self, seed: int) -> None:
        rng = random.Random(seed)
        files = [f"t{i}" for i in range(rng.randint(1, 60))]
        weights = {f: rng.uniform(0.5, 100.0) for f in files}
        shard_count = rng.randint(1, 12)

        shards = split_by_weight(files, shard_count, weights.__getitem__)

        actual = min(shard_count, len(files))
        bound = sum(weights.values()) / actual + max(weights.values())
        assert len(shards) == actual
        assert max(s.weight for s in shards) <= bound + 1e-9


@pytest.mark.parametrize("count", [1, 2, 5, 17, 40])
@pytest.mark.parametrize("shard_count", [1, 3, 8, 100])
def test_every_file_in_exactly_one_shard(count: int, shard_count: int) -> None:
    files = [f"tests/t{i:03d}.scala" for i in range(count)]
    for shards in (
        split_round_robin(files, shard_count),
        split_by_weight(files, shard_count, lambda f: float(len(f) % 7 + 1)),
    ):
        combined = [f for s in shards for f in s.files]
        assert len(shards) == min(shard_count, count)
        assert sorted(combined) == files
