"""PetSnapshot - the complete serializable state of one pet at one instant."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from tick_pet.config import DEFAULT_CONFIG, PetConfig
from tick_pet.growth import resolve_stage
from tick_pet.stats import DEFAULT_STATS, STAT_NAMES, clamp
from tick_pet.types import ACTIVITIES, ACTIVITY_NONE, SLEEPING, CorruptSnapshotError

SNAPSHOT_VERSION = 1

COUNTER_DEFAULTS: dict[str, float] = {
    "feeds": 0,
    "plays": 0,
    "cleans": 0,
    "heals": 0,
    "sleeps": 0,
    "interactions": 0,
    "peak_bond": 0.0,
    "bond_streak_since": -1,  # instant (ms) bond last rose to the streak threshold
    "longest_bond_streak": 0,  # pet days, fractional
    "health_zero_day": -1,  # age day health last hit 0
    "all_high_seen": 0,
}


@dataclass(frozen=True)
class PetSnapshot:
    """Immutable pet state. Transforms return a new snapshot via :meth:`evolve`."""

    stats: Mapping[str, float]
    birth_at: int
    last_interaction_at: int
    last_visited_at: int
    activity: str = ACTIVITY_NONE
    activity_ends_at: int | None = None
    growth_stage: str = "egg"
    age_in_days: int = 0
    achievements: frozenset[str] = frozenset()
    counters: Mapping[str, float] = field(default_factory=lambda: dict(COUNTER_DEFAULTS))
    version: int = SNAPSHOT_VERSION

    @property
    def is_sleeping(self) -> bool:
        return self.activity == SLEEPING

    def stat(self, name: str) -> float:
        return self.stats[name]

    def counter(self, name: str) -> float:
        return self.counters.get(name, COUNTER_DEFAULTS.get(name, 0))

    def display_stats(self) -> dict[str, int]:
        return {name: int(round(value)) for name, value in self.stats.items()}

    def evolve(self, **changes: Any) -> PetSnapshot:
        """Return a copy with *changes* applied; mappings are copied, never shared."""
        changes.setdefault("stats", self.stats)
        changes.setdefault("counters", self.counters)
        changes["stats"] = dict(changes["stats"])
        changes["counters"] = dict(changes["counters"])
        if "achievements" in changes:
            changes["achievements"] = frozenset(changes["achievements"])
        return dataclasses.replace(self, **changes)

    def with_stats(self, **values: float) -> PetSnapshot:
        stats = dict(self.stats)
        for name, value in values.items():
            stats[name] = clamp(float(value))
        return self.evolve(stats=stats)


def new_snapshot(now: int, config: PetConfig = DEFAULT_CONFIG,
                 stats: Mapping[str, float] | None = None) -> PetSnapshot:
    """First-run snapshot: default stats, born at *now*."""
    values = dict(DEFAULT_STATS)
    if stats:
        values.update({k: clamp(float(v)) for k, v in stats.items()})
    return PetSnapshot(
        stats=values,
        birth_at=now,
        last_interaction_at=now,
        last_visited_at=now,
        growth_stage=resolve_stage(0, config.stages),
    )


def snapshot_to_dict(snapshot: PetSnapshot) -> dict[str, Any]:
    return {
        "version": snapshot.version,
        "stats": dict(snapshot.stats),
        "birth_at": snapshot.birth_at,
        "last_interaction_at": snapshot.last_interaction_at,
        "last_visited_at": snapshot.last_visited_at,
        "activity": snapshot.activity,
        "activity_ends_at": snapshot.activity_ends_at,
        "growth_stage": snapshot.growth_stage,
        "age_in_days": snapshot.age_in_days,
        "achievements": sorted(snapshot.achievements),
        "counters": dict(snapshot.counters),
    }


def snapshot_from_dict(data: Mapping[str, Any], config: PetConfig = DEFAULT_CONFIG) -> PetSnapshot:
    """Validate and rebuild a snapshot. Raises CorruptSnapshotError on bad data."""
    if not isinstance(data, Mapping):
        raise CorruptSnapshotError("snapshot must be a mapping")
    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise CorruptSnapshotError(
            f"Unsupported snapshot version {version!r}, expected {SNAPSHOT_VERSION}"
        )

    raw_stats = data.get("stats")
    if not isinstance(raw_stats, Mapping):
        raise CorruptSnapshotError("stats must be a mapping")
    stats: dict[str, float] = {}
    for name in STAT_NAMES:
        if name not in raw_stats:
            raise CorruptSnapshotError(f"missing stat {name!r}")
        value = _number(raw_stats[name], f"stats.{name}")
        if not 0.0 <= value <= 100.0:
            raise CorruptSnapshotError(f"stat {name!r} out of range: {value!r}")
        stats[name] = float(value)

    birth_at = _instant(data, "birth_at")
    last_interaction_at = _instant(data, "last_interaction_at")
    last_visited_at = _instant(data, "last_visited_at")
    if last_visited_at < birth_at:
        raise CorruptSnapshotError("last_visited_at precedes birth_at")
    if last_interaction_at < birth_at:
        raise CorruptSnapshotError("last_interaction_at precedes birth_at")

    activity = data.get("activity", ACTIVITY_NONE)
    if activity not in ACTIVITIES:
        raise CorruptSnapshotError(f"unknown activity {activity!r}")
    ends_at = data.get("activity_ends_at")
    if ends_at is not None:
        ends_at = int(_number(ends_at, "activity_ends_at"))
    if activity not in (ACTIVITY_NONE, SLEEPING) and ends_at is None:
        raise CorruptSnapshotError(f"timed activity {activity!r} has no activity_ends_at")
    if activity in (ACTIVITY_NONE, SLEEPING):
        ends_at = None

    stage = data.get("growth_stage")
    if stage not in config.stage_names:
        raise CorruptSnapshotError(f"unknown growth stage {stage!r}")
    age = _number(data.get("age_in_days"), "age_in_days")
    if age < 0 or age != int(age):
        raise CorruptSnapshotError(f"age_in_days must be a non-negative integer, got {age!r}")

    achievements = data.get("achievements", [])
    if not isinstance(achievements, (list, tuple, set, frozenset)) or not all(
        isinstance(a, str) for a in achievements
    ):
        raise CorruptSnapshotError("achievements must be a list of ids")

    counters = dict(COUNTER_DEFAULTS)
    raw_counters = data.get("counters", {})
    if not isinstance(raw_counters, Mapping):
        raise CorruptSnapshotError("counters must be a mapping")
    for name, value in raw_counters.items():
        counters[str(name)] = _number(value, f"counters.{name}")

    return PetSnapshot(
        stats=stats,
        birth_at=birth_at,
        last_interaction_at=last_interaction_at,
        last_visited_at=last_visited_at,
        activity=activity,
        activity_ends_at=ends_at,
        growth_stage=stage,
        age_in_days=int(age),
        achievements=frozenset(achievements),
        counters=counters,
    )


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptSnapshotError(f"{where} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise CorruptSnapshotError(f"{where} must be finite")
    return value


def _instant(data: Mapping[str, Any], key: str) -> int:
    if key not in data:
        raise CorruptSnapshotError(f"missing field {key!r}")
    value = _number(data[key], key)
    if value < 0:
        raise CorruptSnapshotError(f"{key} must be non-negative")
    return int(value)
