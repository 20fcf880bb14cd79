"""PetEngine - the single entry point the host application calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from tick_pet.achievements import ACHIEVEMENTS, AchievementDef, evaluate, track
from tick_pet.clock import ClockAdapter, SystemClock
from tick_pet.config import DEFAULT_CONFIG, PetConfig
from tick_pet.decay import DecayPath, advance_traced
from tick_pet.events import (
    ACHIEVEMENT_UNLOCKED,
    ACTIVITY_ENDED,
    CLOCK_SKEW_IGNORED,
    STAGE_CHANGED,
    Event,
)
from tick_pet.growth import detect_transition
from tick_pet.guards import InteractionGuards, default_guards
from tick_pet.interactions import apply_interaction, available_interactions
from tick_pet.mood import resolve_mood
from tick_pet.snapshot import PetSnapshot, new_snapshot
from tick_pet.stats import WAKE
from tick_pet.types import ACTIVITY_NONE, SLEEPING, InvalidElapsedTimeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    snapshot: PetSnapshot
    mood: str
    events: tuple[Event, ...] = ()

    @property
    def unlocked(self) -> list[str]:
        return [e.data["id"] for e in self.events if e.type == ACHIEVEMENT_UNLOCKED]

    @property
    def stage_changed(self) -> Event | None:
        for e in self.events:
            if e.type == STAGE_CHANGED:
                return e
        return None


class PetEngine:
    """Composes decay, growth, mood, interactions and achievements.

    Every call is ``(snapshot, now) -> StepResult``; the engine keeps no pet
    state between calls. When *now* is omitted the injected clock supplies it.
    """

    def __init__(
        self,
        config: PetConfig | None = None,
        clock: ClockAdapter | None = None,
        guards: InteractionGuards | None = None,
        achievements: Sequence[AchievementDef] = ACHIEVEMENTS,
    ) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG
        self._clock = clock if clock is not None else SystemClock()
        self._guards = guards if guards is not None else default_guards()
        self._achievements = tuple(achievements)

    @property
    def config(self) -> PetConfig:
        return self._config

    @property
    def clock(self) -> ClockAdapter:
        return self._clock

    def _now(self, now: int | None) -> int:
        return self._clock.now() if now is None else now

    def create(self, now: int | None = None) -> PetSnapshot:
        return new_snapshot(self._now(now), self._config)

    def mood(self, snapshot: PetSnapshot) -> str:
        return resolve_mood(
            snapshot.stats, snapshot.activity,
            threshold=self._config.mood_threshold,
            happy_at=self._config.happy_threshold,
        )

    def available(self, snapshot: PetSnapshot, now: int | None = None) -> list[str]:
        """Interactions accepted at *now*, after finished activities have cleared."""
        return available_interactions(snapshot, self._config, self._guards, now=self._now(now))

    def advance(self, snapshot: PetSnapshot, now: int | None = None) -> StepResult:
        """Catch the pet up to *now*.

        A clock that moved backwards is ignored: the snapshot comes back
        unchanged with a ``clock_skew_ignored`` event.
        """
        now = self._now(now)
        try:
            decayed, path = advance_traced(snapshot, now, self._config)
        except InvalidElapsedTimeError as exc:
            logger.warning(
                "ignoring advance to %r: last visit was %d (%s)",
                now, snapshot.last_visited_at, exc,
            )
            event = Event(at=snapshot.last_visited_at, type=CLOCK_SKEW_IGNORED,
                          data={"now": now, "last_visited_at": snapshot.last_visited_at})
            return StepResult(snapshot, self.mood(snapshot), (event,))
        return self._finish(decayed, now, self._decay_events(snapshot, decayed, now), path)

    def interact(self, snapshot: PetSnapshot, kind: str, now: int | None = None) -> StepResult:
        """Apply a user interaction at *now*.

        Raises InteractionError when the kind is unknown or blocked and
        InvalidElapsedTimeError when *now* precedes the last visit.
        """
        now = self._now(now)
        decayed, path = advance_traced(snapshot, now, self._config)
        # History must see the decayed state before the interaction changes it.
        decayed = track(decayed, self._config.bond_streak_threshold, path)
        events = self._decay_events(snapshot, decayed, now)
        updated = apply_interaction(decayed, kind, now, self._config, self._guards)
        if decayed.activity == SLEEPING and updated.activity == ACTIVITY_NONE:
            events.append(Event(at=now, type=ACTIVITY_ENDED,
                                data={"activity": SLEEPING, "reason": "woken"}))
        return self._finish(updated, now, events)

    def end_sleep(self, snapshot: PetSnapshot, now: int | None = None) -> StepResult:
        return self.interact(snapshot, WAKE, now)

    def _decay_events(self, before: PetSnapshot, after: PetSnapshot, now: int) -> list[Event]:
        events: list[Event] = []
        if before.activity != ACTIVITY_NONE and after.activity == ACTIVITY_NONE:
            reason = "rested" if before.activity == SLEEPING else "finished"
            events.append(Event(at=now, type=ACTIVITY_ENDED,
                                data={"activity": before.activity, "reason": reason}))
        transition = detect_transition(before.growth_stage, after.growth_stage,
                                       now, after.age_in_days)
        if transition is not None:
            logger.info("stage %s -> %s at day %d", before.growth_stage,
                        after.growth_stage, after.age_in_days)
            events.append(transition)
        return events

    def _finish(self, snapshot: PetSnapshot, now: int, events: list[Event],
                path: DecayPath | None = None) -> StepResult:
        tracked = track(snapshot, self._config.bond_streak_threshold, path)
        evaluated, newly = evaluate(tracked, self._achievements)
        for achievement_id in newly:
            events.append(Event(at=now, type=ACHIEVEMENT_UNLOCKED, data={"id": achievement_id}))
        return StepResult(evaluated, self.mood(evaluated), tuple(events))


_default_engine = PetEngine()


def advance(snapshot: PetSnapshot, now: int) -> StepResult:
    return _default_engine.advance(snapshot, now)


def interact(snapshot: PetSnapshot, kind: str, now: int) -> StepResult:
    return _default_engine.interact(snapshot, kind, now)
