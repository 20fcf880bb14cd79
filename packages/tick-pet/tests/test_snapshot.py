"""Tests for tick_pet.snapshot - the value object and its dict codec."""

import json

import pytest

from tick_pet.config import PetConfig
from tick_pet.engine import PetEngine
from tick_pet.growth import StageDef
from tick_pet.snapshot import (
    COUNTER_DEFAULTS,
    SNAPSHOT_VERSION,
    new_snapshot,
    snapshot_from_dict,
    snapshot_to_dict,
)
from tick_pet.types import CorruptSnapshotError

T0 = 1_700_000_000_000
MIN = 60_000


def fresh(**stats):
    return new_snapshot(T0).with_stats(**stats)


def valid_dict(**overrides):
    data = snapshot_to_dict(fresh())
    data.update(overrides)
    return data


class TestNewSnapshot:
    def test_defaults(self):
        s = new_snapshot(T0)
        assert s.stats == {"hunger": 80.0, "energy": 75.0, "happiness": 90.0,
                           "health": 85.0, "cleanliness": 70.0, "bond": 50.0}
        assert s.birth_at == s.last_interaction_at == s.last_visited_at == T0
        assert s.activity == "none"
        assert s.activity_ends_at is None
        assert s.growth_stage == "egg"
        assert s.age_in_days == 0
        assert s.achievements == frozenset()
        assert dict(s.counters) == COUNTER_DEFAULTS

    def test_stat_overrides_are_clamped(self):
        s = new_snapshot(T0, stats={"hunger": 150, "bond": -4})
        assert s.stats["hunger"] == 100.0
        assert s.stats["bond"] == 0.0

    def test_custom_first_stage(self):
        config = PetConfig(stages=(StageDef("seed", 0, 3), StageDef("tree", 3, None)))
        assert new_snapshot(T0, config).growth_stage == "seed"


class TestValueObject:
    def test_evolve_does_not_share_mappings(self):
        s = fresh()
        copy = s.evolve()
        copy.stats["hunger"] = 1.0
        assert s.stats["hunger"] == 80.0

    def test_with_stats_clamps(self):
        assert fresh(energy=250.0).stats["energy"] == 100.0

    def test_equal_by_value(self):
        assert fresh() == fresh()

    def test_display_stats_round(self):
        assert fresh(hunger=64.6).display_stats()["hunger"] == 65

    def test_accessors(self):
        s = fresh().evolve(activity="sleeping")
        assert s.is_sleeping
        assert s.stat("bond") == 50.0
        assert s.counter("feeds") == 0
        assert s.counter("unknown") == 0


class TestCodec:
    def test_round_trip_through_json(self):
        engine = PetEngine()
        s = engine.interact(new_snapshot(T0), "feed", T0 + 7 * MIN).snapshot
        restored = snapshot_from_dict(json.loads(json.dumps(snapshot_to_dict(s))))
        assert restored == s

    def test_achievements_serialized_sorted(self):
        s = fresh().evolve(achievements={"survivor", "hatched"})
        assert snapshot_to_dict(s)["achievements"] == ["hatched", "survivor"]

    def test_version_written(self):
        assert snapshot_to_dict(fresh())["version"] == SNAPSHOT_VERSION

    def test_missing_counters_default(self):
        data = valid_dict()
        del data["counters"]
        assert dict(snapshot_from_dict(data).counters) == COUNTER_DEFAULTS

    def test_sleeping_drops_end_time(self):
        s = snapshot_from_dict(valid_dict(activity="sleeping", activity_ends_at=T0 + 5))
        assert s.activity_ends_at is None


class TestCorrupt:
    def test_not_a_mapping(self):
        with pytest.raises(CorruptSnapshotError):
            snapshot_from_dict(["nope"])

    def test_wrong_version(self):
        with pytest.raises(CorruptSnapshotError, match="version"):
            snapshot_from_dict(valid_dict(version=99))

    def test_missing_stat(self):
        data = valid_dict()
        del data["stats"]["bond"]
        with pytest.raises(CorruptSnapshotError, match="bond"):
            snapshot_from_dict(data)

    @pytest.mark.parametrize("value", [-0.1, 100.5])
    def test_stat_out_of_range(self, value):
        data = valid_dict()
        data["stats"]["hunger"] = value
        with pytest.raises(CorruptSnapshotError, match="out of range"):
            snapshot_from_dict(data)

    @pytest.mark.parametrize("value", ["80", None, True, float("nan")])
    def test_stat_not_a_number(self, value):
        data = valid_dict()
        data["stats"]["hunger"] = value
        with pytest.raises(CorruptSnapshotError):
            snapshot_from_dict(data)

    def test_missing_instant(self):
        data = valid_dict()
        del data["birth_at"]
        with pytest.raises(CorruptSnapshotError, match="birth_at"):
            snapshot_from_dict(data)

    def test_negative_instant(self):
        with pytest.raises(CorruptSnapshotError, match="non-negative"):
            snapshot_from_dict(valid_dict(last_visited_at=-1))

    def test_visit_before_birth(self):
        with pytest.raises(CorruptSnapshotError, match="precedes"):
            snapshot_from_dict(valid_dict(last_visited_at=T0 - 1))

    def test_unknown_activity(self):
        with pytest.raises(CorruptSnapshotError, match="activity"):
            snapshot_from_dict(valid_dict(activity="flying"))

    def test_timed_activity_needs_end(self):
        with pytest.raises(CorruptSnapshotError, match="activity_ends_at"):
            snapshot_from_dict(valid_dict(activity="eating", activity_ends_at=None))

    def test_unknown_stage(self):
        with pytest.raises(CorruptSnapshotError, match="growth stage"):
            snapshot_from_dict(valid_dict(growth_stage="dragon"))

    @pytest.mark.parametrize("age", [-1, 2.5, None])
    def test_bad_age(self, age):
        with pytest.raises(CorruptSnapshotError):
            snapshot_from_dict(valid_dict(age_in_days=age))

    def test_bad_achievements(self):
        with pytest.raises(CorruptSnapshotError, match="achievements"):
            snapshot_from_dict(valid_dict(achievements="hatched"))

    def test_bad_counter(self):
        with pytest.raises(CorruptSnapshotError, match="counters"):
            snapshot_from_dict(valid_dict(counters={"feeds": "many"}))
