"""Stat fields, bounds, decay rates and the interaction effect table."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Mapping

from tick_pet.types import (
    ACTIVITIES,
    ACTIVITY_NONE,
    CLEANING,
    EATING,
    HEALING,
    PLAYING,
    SLEEPING,
)

STAT_NAMES = ("hunger", "energy", "happiness", "health", "cleanliness", "bond")
STAT_MIN = 0.0
STAT_MAX = 100.0

# One real minute is one pet day.
MS_PER_MINUTE = 60_000

DEFAULT_STATS: dict[str, float] = {
    "hunger": 80.0,
    "energy": 75.0,
    "happiness": 90.0,
    "health": 85.0,
    "cleanliness": 70.0,
    "bond": 50.0,
}

FEED = "feed"
PLAY = "play"
CLEAN = "clean"
SLEEP = "sleep"
WAKE = "wake"
HEAL = "heal"

ACTIVITY_DURATION_MS = 3_000


def clamp(value: float, lo: float = STAT_MIN, hi: float = STAT_MAX) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class DecayRates:
    """Per-minute rates. Every stat is 100 = best, 0 = worst."""

    hunger: float = 1.5
    energy: float = 1.2
    happiness: float = 0.8
    cleanliness: float = 0.5
    health: float = 0.05
    neglected_health: float = 2.0  # extra health loss while hunger or cleanliness is 0
    sleep_energy: float = 5.0  # energy restored per minute while sleeping
    sleep_hunger_factor: float = 0.5  # hunger drains slower while sleeping
    bond_recovery: float = 0.25
    bond_decay: float = 0.5
    bond_neglect_ms: int = 10 * MS_PER_MINUTE  # no interaction for this long -> bond decays

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"rate {f.name} must be a number")
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"rate {f.name} must be finite and non-negative")


@dataclass(frozen=True)
class InteractionDef:
    """One row of the interaction table.

    ``sets`` are absolute values applied before the relative ``deltas``.
    ``restores`` are deltas applied when a timed activity runs to its end
    (a temporary dip); an activity replaced early forfeits them.
    ``duration_ms`` of ``None`` marks a toggle (no fixed end).
    ``conditions`` are guard names; the interaction is blocked if ANY passes.
    """

    kind: str
    activity: str
    deltas: Mapping[str, float] = field(default_factory=dict)
    sets: Mapping[str, float] = field(default_factory=dict)
    duration_ms: int | None = ACTIVITY_DURATION_MS
    conditions: tuple[str, ...] = ()
    counter: str | None = None
    restores: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.activity not in ACTIVITIES:
            raise ValueError(f"unknown activity {self.activity!r} for {self.kind!r}")
        if self.duration_ms is not None and self.duration_ms <= 0:
            raise ValueError(f"duration_ms for {self.kind!r} must be positive")
        for name in (*self.deltas, *self.sets, *self.restores):
            if name not in STAT_NAMES:
                raise ValueError(f"unknown stat {name!r} in {self.kind!r}")

    @property
    def is_toggle(self) -> bool:
        return self.duration_ms is None


DEFAULT_INTERACTIONS: dict[str, InteractionDef] = {
    FEED: InteractionDef(
        kind=FEED, activity=EATING,
        deltas={"hunger": 20.0, "energy": 5.0},
        conditions=("sleeping",), counter="feeds",
    ),
    PLAY: InteractionDef(
        kind=PLAY, activity=PLAYING,
        deltas={"happiness": 25.0, "energy": -15.0, "hunger": -10.0},
        conditions=("sleeping", "low_energy"), counter="plays",
    ),
    CLEAN: InteractionDef(
        kind=CLEAN, activity=CLEANING,
        sets={"cleanliness": 100.0}, deltas={"happiness": -5.0},
        conditions=("sleeping",), counter="cleans",
        restores={"happiness": 5.0},
    ),
    HEAL: InteractionDef(
        kind=HEAL, activity=HEALING,
        deltas={"health": 25.0, "happiness": -5.0},
        conditions=("sleeping", "healthy"), counter="heals",
    ),
    SLEEP: InteractionDef(
        kind=SLEEP, activity=SLEEPING, duration_ms=None,
        conditions=("busy",), counter="sleeps",
    ),
    WAKE: InteractionDef(
        kind=WAKE, activity=ACTIVITY_NONE, duration_ms=None,
        conditions=("awake",),
    ),
}


def apply_effects(
    stats: Mapping[str, float],
    deltas: Mapping[str, float] | None = None,
    sets: Mapping[str, float] | None = None,
) -> dict[str, float]:
    """Return new stats with absolute ``sets`` then relative ``deltas`` applied, clamped."""
    out = dict(stats)
    for name, value in (sets or {}).items():
        out[name] = clamp(float(value))
    for name, delta in (deltas or {}).items():
        out[name] = clamp(out.get(name, STAT_MIN) + float(delta))
    return out
