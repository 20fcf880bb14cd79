"""MoodResolver - discrete mood derived from current stats."""

from __future__ import annotations

from typing import Mapping

from tick_pet.types import ACTIVITY_NONE, SLEEPING

# Worst-first: when several stats are low, the earliest entry wins.
MOOD_PRIORITY: tuple[tuple[str, str], ...] = (
    ("health", "sick"),
    ("hunger", "hungry"),
    ("cleanliness", "dirty"),
    ("energy", "tired"),
    ("happiness", "sad"),
)

MOODS = ("sleeping", *(label for _, label in MOOD_PRIORITY), "happy", "neutral")


def low_stats(stats: Mapping[str, float], threshold: float = 20.0) -> list[str]:
    """Stats below *threshold*, in priority order."""
    return [name for name, _ in MOOD_PRIORITY if stats[name] < threshold]


def resolve_mood(
    stats: Mapping[str, float],
    activity: str = ACTIVITY_NONE,
    threshold: float = 20.0,
    happy_at: float = 70.0,
) -> str:
    if activity == SLEEPING:
        return "sleeping"
    for name, label in MOOD_PRIORITY:
        if stats[name] < threshold:
            return label
    if stats["happiness"] >= happy_at:
        return "happy"
    return "neutral"
