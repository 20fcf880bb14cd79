"""Growth stages derived from age in pet days."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tick_pet.events import STAGE_CHANGED, Event


@dataclass(frozen=True)
class StageDef:
    """Half-open day range ``[start, end)``; ``end=None`` is open-ended."""

    name: str
    start: int
    end: int | None = None


DEFAULT_STAGES: tuple[StageDef, ...] = (
    StageDef("egg", 0, 6),
    StageDef("chick", 6, 11),
    StageDef("teen", 11, 21),
    StageDef("adult", 21, None),
)

STAGE_NAMES = tuple(s.name for s in DEFAULT_STAGES)


def validate_stages(stages: Sequence[StageDef]) -> None:
    """Ensure every non-negative age maps to exactly one stage.

    Raises ValueError unless ranges start at 0, are contiguous and
    non-overlapping, and only the last one is open-ended.
    """
    if not stages:
        raise ValueError("stage table must not be empty")
    if stages[0].start != 0:
        raise ValueError("first stage must start at day 0")
    seen: set[str] = set()
    for i, stage in enumerate(stages):
        if stage.name in seen:
            raise ValueError(f"duplicate stage name {stage.name!r}")
        seen.add(stage.name)
        last = i == len(stages) - 1
        if stage.end is None:
            if not last:
                raise ValueError(f"only the last stage may be open-ended, not {stage.name!r}")
            continue
        if stage.end <= stage.start:
            raise ValueError(f"stage {stage.name!r} has an empty range")
        if last:
            raise ValueError("last stage must be open-ended")
        if stages[i + 1].start != stage.end:
            raise ValueError(
                f"stage {stages[i + 1].name!r} must start at day {stage.end}"
            )


def resolve_stage(age_in_days: int, stages: Sequence[StageDef] = DEFAULT_STAGES) -> str:
    if age_in_days < 0:
        raise ValueError("age_in_days must be non-negative")
    for stage in stages:
        if stage.end is None or age_in_days < stage.end:
            return stage.name
    raise ValueError("stage table is not total")


def stage_index(stage: str, stages: Sequence[StageDef] = DEFAULT_STAGES) -> int:
    for i, s in enumerate(stages):
        if s.name == stage:
            return i
    raise ValueError(f"unknown stage {stage!r}")


def at_least(stage: str, minimum: str, stages: Sequence[StageDef] = DEFAULT_STAGES) -> bool:
    """True if *stage* is *minimum* or later. Unknown names compare False."""
    try:
        return stage_index(stage, stages) >= stage_index(minimum, stages)
    except ValueError:
        return False


def detect_transition(previous: str, current: str, at: int, age_in_days: int) -> Event | None:
    if previous == current:
        return None
    return Event(
        at=at,
        type=STAGE_CHANGED,
        data={"previous": previous, "current": current, "age_in_days": age_in_days},
    )
