"""Shared type aliases, activity names and errors for the pet engine."""

from __future__ import annotations

# Instants are integer milliseconds since the Unix epoch.
Millis = int

ACTIVITY_NONE = "none"
EATING = "eating"
PLAYING = "playing"
CLEANING = "cleaning"
SLEEPING = "sleeping"
HEALING = "healing"

ACTIVITIES = (ACTIVITY_NONE, EATING, PLAYING, CLEANING, SLEEPING, HEALING)


class PetError(Exception):
    """Base class for errors raised by the pet engine."""


class InteractionError(PetError):
    """Raised when an interaction is unknown or unavailable in the current state.

    ``reason`` is ``"blocked"`` when a guard refused the interaction and
    ``"unknown"`` when no interaction of that kind is configured.
    """

    def __init__(
        self,
        reason: str,
        kind: str,
        current_activity: str,
        guard: str | None = None,
    ) -> None:
        self.reason = reason
        self.kind = kind
        self.current_activity = current_activity
        self.guard = guard
        detail = f" by guard {guard!r}" if guard else ""
        super().__init__(
            f"Interaction {kind!r} {reason}{detail} (activity={current_activity!r})"
        )


class InvalidElapsedTimeError(PetError, ValueError):
    """Raised for a negative or non-finite elapsed duration (clock moved backwards)."""

    def __init__(self, elapsed_ms: float) -> None:
        self.elapsed_ms = elapsed_ms
        super().__init__(f"Invalid elapsed time {elapsed_ms!r} ms")


class CorruptSnapshotError(PetError):
    """Raised when persisted data fails schema or range validation."""
