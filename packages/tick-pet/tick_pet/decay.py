"""DecayEngine - time-proportional decay, including offline catch-up.

Decay is a pure function of the elapsed interval. The interval is cut into
piecewise-linear segments at the instants where the rules change (the pet
wakes up, the bond-neglect window opens, a timed activity finishes, hunger or
cleanliness runs out), and within a segment every stat moves linearly.
Because those instants are absolute, one large call and many small calls over
the same span land on the same values.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping

from tick_pet.config import DEFAULT_CONFIG, PetConfig
from tick_pet.growth import resolve_stage
from tick_pet.snapshot import PetSnapshot
from tick_pet.stats import MS_PER_MINUTE, STAT_MAX, DecayRates, apply_effects, clamp
from tick_pet.types import ACTIVITY_NONE, SLEEPING, InvalidElapsedTimeError

logger = logging.getLogger(__name__)

# (instant in ms, stats) breakpoints; stats move linearly between neighbours.
DecayPath = list[tuple[float, dict[str, float]]]


def age_in_days(birth_at: int, now: int) -> int:
    """Pet age from absolute time, never from accumulated deltas."""
    return max(0, (now - birth_at) // MS_PER_MINUTE)


def decay(snapshot: PetSnapshot, elapsed_ms: float,
          config: PetConfig = DEFAULT_CONFIG) -> PetSnapshot:
    """Apply *elapsed_ms* of decay to *snapshot*.

    Zero elapsed time returns the snapshot unchanged. Negative or non-finite
    durations raise InvalidElapsedTimeError. Sub-millisecond fractions are
    dropped.
    """
    return _decay(snapshot, _checked(elapsed_ms), config)[0]


def advance_to(snapshot: PetSnapshot, now: int,
               config: PetConfig = DEFAULT_CONFIG) -> PetSnapshot:
    """Decay *snapshot* up to the instant *now*."""
    return decay(snapshot, now - snapshot.last_visited_at, config)


def advance_traced(snapshot: PetSnapshot, now: int,
                   config: PetConfig = DEFAULT_CONFIG) -> tuple[PetSnapshot, DecayPath]:
    """Like :func:`advance_to`, also returning the path the stats took.

    The path runs from ``last_visited_at`` to *now*. Two breakpoints share an
    instant where an effect lands at once (a finished activity restoring a
    stat).
    """
    return _decay(snapshot, _checked(now - snapshot.last_visited_at), config)


def _checked(elapsed_ms: float) -> int:
    if (isinstance(elapsed_ms, bool) or not isinstance(elapsed_ms, (int, float))
            or not math.isfinite(elapsed_ms) or elapsed_ms < 0):
        raise InvalidElapsedTimeError(elapsed_ms)
    return int(elapsed_ms)


def _decay(snapshot: PetSnapshot, elapsed: int,
           config: PetConfig) -> tuple[PetSnapshot, DecayPath]:
    base = snapshot.last_visited_at
    if elapsed == 0:
        return snapshot, [(float(base), dict(snapshot.stats))]

    rates = config.rates
    now = base + elapsed
    minutes = elapsed / MS_PER_MINUTE

    sleeping = snapshot.activity == SLEEPING
    wake_at = _minutes_until_rested(snapshot.stats["energy"], rates) if sleeping else math.inf
    neglect_at = max(0.0, (snapshot.last_interaction_at + rates.bond_neglect_ms - base)
                     / MS_PER_MINUTE)
    timed = snapshot.activity not in (ACTIVITY_NONE, SLEEPING) and snapshot.activity_ends_at is not None
    finish_at = max(0.0, (snapshot.activity_ends_at - base) / MS_PER_MINUTE) if timed else math.inf
    restores = _restores_for(snapshot.activity, config) if timed else {}

    points: list[tuple[float, dict[str, float]]] = [(0.0, dict(snapshot.stats))]
    if restores and finish_at == 0.0:
        points.append((0.0, apply_effects(points[-1][1], restores)))
    cuts = sorted({0.0, minutes,
                   *(t for t in (wake_at, neglect_at, finish_at) if 0.0 < t < minutes)})
    for start, end in zip(cuts, cuts[1:]):
        _walk(points, start, end, rates,
              asleep=sleeping and start < wake_at,
              neglected=start >= neglect_at)
        if restores and end == finish_at:
            points.append((end, apply_effects(points[-1][1], restores)))

    activity = snapshot.activity
    ends_at = snapshot.activity_ends_at
    if sleeping and wake_at <= minutes:
        activity, ends_at = ACTIVITY_NONE, None
    elif timed and now >= ends_at:
        activity, ends_at = ACTIVITY_NONE, None

    age = age_in_days(snapshot.birth_at, now)
    logger.debug("decayed %.3f min (%d breakpoints), age %d", minutes, len(points), age)
    decayed = snapshot.evolve(
        stats=points[-1][1],
        last_visited_at=now,
        activity=activity,
        activity_ends_at=ends_at,
        age_in_days=age,
        growth_stage=resolve_stage(age, config.stages),
    )
    path = [(float(now) if m == minutes else base + m * MS_PER_MINUTE, stats)
            for m, stats in points]
    return decayed, path


def _restores_for(activity: str, config: PetConfig) -> Mapping[str, float]:
    for defn in config.interactions.values():
        if defn.activity == activity and defn.restores:
            return defn.restores
    return {}


def _minutes_until_rested(energy: float, rates: DecayRates) -> float:
    if energy >= STAT_MAX:
        return 0.0
    if rates.sleep_energy <= 0:
        return math.inf
    return (STAT_MAX - energy) / rates.sleep_energy


def _minutes_until_empty(value: float, rate: float) -> float:
    if value <= 0.0:
        return 0.0
    if rate <= 0.0:
        return math.inf
    return value / rate


def _hunger_rate(rates: DecayRates, asleep: bool) -> float:
    return rates.hunger * (rates.sleep_hunger_factor if asleep else 1.0)


def _minutes_until_neglect(stats: Mapping[str, float], rates: DecayRates, asleep: bool) -> float:
    """Minutes until hunger or cleanliness first reaches 0."""
    return min(
        _minutes_until_empty(stats["hunger"], _hunger_rate(rates, asleep)),
        _minutes_until_empty(stats["cleanliness"], rates.cleanliness),
    )


def _walk(points: list[tuple[float, dict[str, float]]], start: float, end: float,
          rates: DecayRates, asleep: bool, neglected: bool) -> None:
    """Append the breakpoints of one segment, splitting where health damage starts."""
    stats = points[-1][1]
    empty_at = start + _minutes_until_neglect(stats, rates, asleep)
    if start < empty_at < end:
        stats = _decay_segment(stats, empty_at - start, rates, asleep, neglected)
        points.append((empty_at, stats))
        start = empty_at
    points.append((end, _decay_segment(stats, end - start, rates, asleep, neglected)))


def _decay_segment(stats: Mapping[str, float], minutes: float, rates: DecayRates,
                   asleep: bool, neglected: bool) -> dict[str, float]:
    out = dict(stats)
    hunger_rate = _hunger_rate(rates, asleep)

    # Health takes extra damage from the moment hunger or cleanliness hits 0.
    neglect = max(0.0, minutes - _minutes_until_neglect(stats, rates, asleep))

    out["hunger"] = clamp(stats["hunger"] - hunger_rate * minutes)
    if asleep:
        out["energy"] = clamp(stats["energy"] + rates.sleep_energy * minutes)
    else:
        out["energy"] = clamp(stats["energy"] - rates.energy * minutes)
    out["happiness"] = clamp(stats["happiness"] - rates.happiness * minutes)
    out["cleanliness"] = clamp(stats["cleanliness"] - rates.cleanliness * minutes)
    out["health"] = clamp(
        stats["health"] - rates.health * minutes - rates.neglected_health * neglect
    )
    if asleep or neglected:
        out["bond"] = clamp(stats["bond"] - rates.bond_decay * minutes)
    else:
        out["bond"] = clamp(stats["bond"] + rates.bond_recovery * minutes)
    return out
