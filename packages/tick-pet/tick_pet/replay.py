"""Replay a recorded sequence of engine calls.

Given the same starting snapshot and the same ordered calls, the final
snapshot and the unlock order are identical on every run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from tick_pet.engine import PetEngine
from tick_pet.events import Event
from tick_pet.snapshot import PetSnapshot
from tick_pet.types import InteractionError


@dataclass(frozen=True)
class Call:
    """``kind=None`` is an ``advance``; anything else is an interaction."""

    at: int
    kind: str | None = None


@dataclass(frozen=True)
class ReplayResult:
    snapshot: PetSnapshot
    unlocked: tuple[str, ...]
    events: tuple[Event, ...]
    rejected: tuple[tuple[int, str, str], ...]  # (at, kind, reason)


def replay(initial: PetSnapshot, calls: Iterable[Call],
           engine: PetEngine | None = None) -> ReplayResult:
    engine = engine if engine is not None else PetEngine()
    snapshot = initial
    unlocked: list[str] = []
    events: list[Event] = []
    rejected: list[tuple[int, str, str]] = []
    for call in calls:
        if call.kind is None:
            result = engine.advance(snapshot, call.at)
        else:
            try:
                result = engine.interact(snapshot, call.kind, call.at)
            except InteractionError as exc:
                rejected.append((call.at, call.kind, exc.reason))
                continue
        snapshot = result.snapshot
        unlocked.extend(result.unlocked)
        events.extend(result.events)
    return ReplayResult(snapshot, tuple(unlocked), tuple(events), tuple(rejected))
