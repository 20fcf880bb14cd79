"""Structured notifications returned alongside each new snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

STAGE_CHANGED = "stage_changed"
ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
ACTIVITY_ENDED = "activity_ended"
CLOCK_SKEW_IGNORED = "clock_skew_ignored"


@dataclass(frozen=True)
class Event:
    at: int
    type: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"at": self.at, "type": self.type, "data": dict(self.data)}


def filter_events(events: list[Event] | tuple[Event, ...], type: str) -> list[Event]:
    return [e for e in events if e.type == type]
