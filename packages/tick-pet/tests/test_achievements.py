"""Tests for tick_pet.achievements - history tracking and unlock order."""

import pytest

from tick_pet.achievements import (
    ACHIEVEMENTS,
    AchievementDef,
    evaluate,
    track,
)
from tick_pet.decay import advance_traced
from tick_pet.snapshot import new_snapshot

T0 = 1_700_000_000_000
MIN = 60_000


def fresh(**stats):
    return new_snapshot(T0).with_stats(**stats)


def with_counters(snapshot, **counters):
    merged = dict(snapshot.counters)
    merged.update(counters)
    return snapshot.evolve(counters=merged)


def at(snapshot, minutes):
    """The same state seen *minutes* after T0."""
    return snapshot.evolve(last_visited_at=T0 + minutes * MIN, age_in_days=minutes)


class TestDefinitions:
    def test_ids_are_unique(self):
        ids = [d.id for d in ACHIEVEMENTS]
        assert len(ids) == len(set(ids))

    def test_declaration_order(self):
        assert [d.id for d in ACHIEVEMENTS] == [
            "first_meal", "hatched", "playful", "squeaky_clean", "well_rested",
            "best_friends", "survivor", "gourmet", "thriving", "grown_up", "loyal",
        ]

    def test_every_definition_has_title_and_description(self):
        for d in ACHIEVEMENTS:
            assert d.title and d.description


class TestEvaluate:
    def test_new_pet_unlocks_nothing(self):
        s, newly = evaluate(fresh())
        assert newly == []
        assert s.achievements == frozenset()

    def test_first_meal(self):
        s, newly = evaluate(with_counters(fresh(), feeds=1))
        assert newly == ["first_meal"]
        assert "first_meal" in s.achievements

    def test_reevaluation_is_noop(self):
        s, _ = evaluate(with_counters(fresh(), feeds=1))
        again, newly = evaluate(s)
        assert newly == []
        assert again is s

    def test_unlocks_are_monotonic(self):
        """An achievement stays unlocked after its condition stops holding."""
        s, _ = evaluate(fresh(bond=95.0))
        assert "best_friends" in s.achievements
        dropped, newly = evaluate(s.with_stats(bond=10.0))
        assert newly == []
        assert "best_friends" in dropped.achievements

    def test_simultaneous_unlocks_in_declaration_order(self):
        s = with_counters(fresh(), feeds=50, plays=10, cleans=10, sleeps=5)
        _, newly = evaluate(s)
        assert newly == ["first_meal", "playful", "squeaky_clean", "well_rested", "gourmet"]

    def test_counter_thresholds(self):
        _, newly = evaluate(with_counters(fresh(), plays=9, cleans=9, sleeps=4))
        assert newly == []

    def test_stage_achievements(self):
        s = fresh().evolve(growth_stage="adult", age_in_days=21)
        _, newly = evaluate(s)
        assert "hatched" in newly
        assert "grown_up" in newly
        assert newly.index("hatched") < newly.index("grown_up")

    def test_custom_definitions(self):
        defs = (AchievementDef("named", "Named", "Always true.", lambda s: True),)
        s, newly = evaluate(fresh(), defs)
        assert newly == ["named"]
        assert s.achievements == frozenset({"named"})

    def test_input_snapshot_untouched(self):
        s = with_counters(fresh(), feeds=1)
        evaluate(s)
        assert s.achievements == frozenset()


class TestTrack:
    def test_records_peak_bond(self):
        s = track(fresh(bond=92.0))
        s = track(s.with_stats(bond=40.0))
        assert s.counter("peak_bond") == 92.0

    def test_unchanged_history_returns_same_snapshot(self):
        s = track(fresh())
        assert track(s) is s

    def test_bond_streak_measured_in_pet_days(self):
        s = track(fresh(bond=85.0))
        assert s.counter("bond_streak_since") == T0
        s = track(at(s, 3))
        assert s.counter("longest_bond_streak") == 3.0

    def test_bond_streak_credited_until_it_ends(self):
        s = track(fresh(bond=85.0))
        s = track(at(s, 3).with_stats(bond=50.0))
        assert s.counter("bond_streak_since") == -1
        assert s.counter("longest_bond_streak") == 3.0
        s = track(at(s, 4).with_stats(bond=85.0))
        assert s.counter("bond_streak_since") == T0 + 4 * MIN
        assert s.counter("longest_bond_streak") == 3.0

    def test_custom_streak_threshold(self):
        s = track(fresh(bond=60.0), streak_threshold=50.0)
        assert s.counter("bond_streak_since") == T0

    def test_health_zero_day(self):
        s = track(at(fresh(health=0.0), 9))
        assert s.counter("health_zero_day") == 9

    def test_all_high_seen(self):
        s = track(fresh(hunger=90.0, energy=90.0, happiness=90.0,
                        health=90.0, cleanliness=90.0, bond=90.0))
        assert s.counter("all_high_seen") == 1


class TestTrackAlongPath:
    def test_bond_dip_inside_interval(self):
        """Asleep bond falls below 80 at minute 1, recovers past it at minute 4."""
        s = track(fresh(bond=80.5, energy=90.0).evolve(activity="sleeping"))
        decayed, path = advance_traced(s, T0 + 10 * MIN)
        s = track(decayed, path=path)
        assert s.counter("longest_bond_streak") == pytest.approx(6.0)
        assert s.counter("bond_streak_since") == pytest.approx(T0 + 4 * MIN)

    def test_streak_same_for_coarse_and_fine_calls(self):
        start = track(fresh(bond=80.5, energy=90.0).evolve(activity="sleeping"))
        decayed, path = advance_traced(start, T0 + 10 * MIN)
        coarse = track(decayed, path=path)
        fine = start
        for minute in range(1, 11):
            decayed, path = advance_traced(fine, T0 + minute * MIN)
            fine = track(decayed, path=path)
        assert dict(fine.counters) == pytest.approx(dict(coarse.counters))

    def test_peak_bond_inside_interval(self):
        """Bond recovers for 10 minutes, then decays once neglected."""
        decayed, path = advance_traced(fresh(bond=88.0), T0 + 20 * MIN)
        assert decayed.stats["bond"] == pytest.approx(85.5)
        s = track(decayed, path=path)
        assert s.counter("peak_bond") == pytest.approx(90.5)
        _, newly = evaluate(s)
        assert "best_friends" in newly

    def test_all_high_moment_inside_interval(self):
        """Energy climbs past 80 at minute 2 while happiness lasts until 6.25."""
        start = fresh(hunger=85.0, energy=70.0, happiness=85.0, health=85.0,
                      cleanliness=85.0, bond=85.0).evolve(activity="sleeping")
        decayed, path = advance_traced(start, T0 + 10 * MIN)
        assert decayed.stats["happiness"] < 80.0
        assert track(decayed).counter("all_high_seen") == 0
        assert track(decayed, path=path).counter("all_high_seen") == 1

    def test_zero_length_path(self):
        s = fresh()
        decayed, path = advance_traced(s, T0)
        assert decayed is s
        assert track(decayed, path=path) == track(s)


class TestHistoryAchievements:
    def test_loyal_after_five_day_streak(self):
        s = track(fresh(bond=85.0))
        s = track(at(s, 5))
        _, newly = evaluate(s)
        assert "loyal" in newly

    def test_thriving_sticks_once_seen(self):
        s = track(fresh(hunger=90.0, energy=90.0, happiness=90.0,
                        health=90.0, cleanliness=90.0, bond=90.0))
        _, newly = evaluate(s.with_stats(hunger=10.0))
        assert "thriving" in newly

    def test_survivor_needs_seven_days(self):
        _, newly = evaluate(fresh().evolve(age_in_days=6))
        assert "survivor" not in newly
        _, newly = evaluate(fresh().evolve(age_in_days=7))
        assert "survivor" in newly

    def test_survivor_counts_from_last_zero_health(self):
        s = track(at(fresh(health=0.0), 3))
        s = at(s.with_stats(health=50.0), 9)
        _, newly = evaluate(s)
        assert "survivor" not in newly
        _, newly = evaluate(at(s, 10))
        assert "survivor" in newly

    def test_survivor_not_while_health_zero(self):
        _, newly = evaluate(fresh(health=0.0).evolve(age_in_days=30))
        assert "survivor" not in newly


@pytest.mark.parametrize("counter,value,achievement", [
    ("feeds", 1, "first_meal"),
    ("plays", 10, "playful"),
    ("cleans", 10, "squeaky_clean"),
    ("sleeps", 5, "well_rested"),
    ("feeds", 50, "gourmet"),
])
def test_counter_achievement(counter, value, achievement):
    _, newly = evaluate(with_counters(fresh(), **{counter: value}))
    assert achievement in newly
