"""AchievementEngine - unlock predicates over snapshot state and counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Sequence

from tick_pet.decay import DecayPath, age_in_days
from tick_pet.growth import at_least
from tick_pet.snapshot import PetSnapshot
from tick_pet.stats import MS_PER_MINUTE, STAT_NAMES

logger = logging.getLogger(__name__)

HIGH_STAT = 80.0
SURVIVOR_DAYS = 7
LOYAL_DAYS = 5


@dataclass(frozen=True)
class AchievementDef:
    """Definition of an achievement. Predicates must read only the snapshot."""

    id: str
    title: str
    description: str
    predicate: Callable[[PetSnapshot], bool]


def _survived(s: PetSnapshot) -> bool:
    since = max(0, int(s.counter("health_zero_day")))
    return s.stats["health"] > 0 and s.age_in_days - since >= SURVIVOR_DAYS


def _all_high(s: PetSnapshot) -> bool:
    return all(s.stats[name] >= HIGH_STAT for name in STAT_NAMES)


# Declaration order is notification order.
ACHIEVEMENTS: tuple[AchievementDef, ...] = (
    AchievementDef("first_meal", "First Meal", "Feed your pet for the first time.",
                   lambda s: s.counter("feeds") >= 1),
    AchievementDef("hatched", "Hatched", "Your egg hatched into a chick.",
                   lambda s: at_least(s.growth_stage, "chick")),
    AchievementDef("playful", "Playful", "Play 10 times.",
                   lambda s: s.counter("plays") >= 10),
    AchievementDef("squeaky_clean", "Squeaky Clean", "Clean 10 times.",
                   lambda s: s.counter("cleans") >= 10),
    AchievementDef("well_rested", "Well Rested", "Put your pet to sleep 5 times.",
                   lambda s: s.counter("sleeps") >= 5),
    AchievementDef("best_friends", "Best Friends", "Reach a bond of 90.",
                   lambda s: s.counter("peak_bond") >= 90.0 or s.stats["bond"] >= 90.0),
    AchievementDef("survivor", "Survivor",
                   f"Live {SURVIVOR_DAYS} pet days without health reaching 0.", _survived),
    AchievementDef("gourmet", "Gourmet", "Feed 50 times.",
                   lambda s: s.counter("feeds") >= 50),
    AchievementDef("thriving", "Thriving", "Have every stat at 80 or more at once.",
                   lambda s: bool(s.counter("all_high_seen")) or _all_high(s)),
    AchievementDef("grown_up", "Grown Up", "Reach the adult stage.",
                   lambda s: at_least(s.growth_stage, "adult")),
    AchievementDef("loyal", "Loyal",
                   f"Keep bond at 80 or more for {LOYAL_DAYS} pet days in a row.",
                   lambda s: s.counter("longest_bond_streak") >= LOYAL_DAYS),
)


def track(
    snapshot: PetSnapshot,
    streak_threshold: float = 80.0,
    path: DecayPath | None = None,
) -> PetSnapshot:
    """Fold the state into the history counters.

    *path* is the decay path that led to *snapshot* (see
    :func:`tick_pet.decay.advance_traced`). Stats move linearly between its
    breakpoints, so peaks, threshold crossings and all-high moments inside
    an interval are seen exactly, however the host splits its calls.
    Without a path only the current state is sampled.
    """
    if path is None:
        path = [(float(snapshot.last_visited_at), dict(snapshot.stats))]
    counters = dict(snapshot.counters)

    counters["peak_bond"] = max(float(counters.get("peak_bond", 0.0)),
                                *(stats["bond"] for _, stats in path))

    since = float(counters.get("bond_streak_since", -1))
    longest = float(counters.get("longest_bond_streak", 0))
    prev_at, prev = path[0]
    since, longest = _sample_streak(prev_at, prev["bond"], since, longest, streak_threshold)
    for at, stats in path[1:]:
        a, b = prev["bond"], stats["bond"]
        if (a >= streak_threshold) != (b >= streak_threshold):
            crossing = prev_at + (at - prev_at) * (streak_threshold - a) / (b - a)
            since, longest = _sample_streak(crossing, b, since, longest, streak_threshold)
        since, longest = _sample_streak(at, b, since, longest, streak_threshold)
        prev_at, prev = at, stats
    counters["bond_streak_since"] = since
    counters["longest_bond_streak"] = longest

    zeroed = [at for at, stats in path if stats["health"] <= 0.0]
    if zeroed:
        counters["health_zero_day"] = age_in_days(snapshot.birth_at, int(zeroed[-1]))

    points = [stats for _, stats in path]
    spans = list(zip(points, points[1:])) or [(points[0], points[0])]
    if any(_all_high_within(a, b) for a, b in spans):
        counters["all_high_seen"] = 1

    if counters == dict(snapshot.counters):
        return snapshot
    return snapshot.evolve(counters=counters)


def _sample_streak(at: float, bond: float, since: float, longest: float,
                   threshold: float) -> tuple[float, float]:
    """Streak state after seeing *bond* at *at*; an ended streak is credited up to *at*."""
    if bond >= threshold:
        if since < 0:
            since = at
        return since, max(longest, (at - since) / MS_PER_MINUTE)
    if since >= 0:
        longest = max(longest, (at - since) / MS_PER_MINUTE)
    return -1.0, longest


def _all_high_within(a: Mapping[str, float], b: Mapping[str, float]) -> bool:
    """Whether every stat is at least HIGH_STAT at some instant on the line from *a* to *b*."""
    lo, hi = 0.0, 1.0
    for name in STAT_NAMES:
        x, y = a[name], b[name]
        if x >= HIGH_STAT and y >= HIGH_STAT:
            continue
        if x < HIGH_STAT and y < HIGH_STAT:
            return False
        t = (HIGH_STAT - x) / (y - x)
        if x < HIGH_STAT:
            lo = max(lo, t)
        else:
            hi = min(hi, t)
    return lo <= hi


def evaluate(
    snapshot: PetSnapshot,
    defs: Sequence[AchievementDef] = ACHIEVEMENTS,
) -> tuple[PetSnapshot, list[str]]:
    """Return the snapshot with new unlocks added and the new ids in declaration order.

    Already-unlocked achievements are skipped, so re-evaluating is a no-op.
    """
    newly = [d.id for d in defs if d.id not in snapshot.achievements and d.predicate(snapshot)]
    if not newly:
        return snapshot, []
    for achievement_id in newly:
        logger.info("achievement unlocked: %s", achievement_id)
    return snapshot.evolve(achievements=snapshot.achievements | set(newly)), newly
