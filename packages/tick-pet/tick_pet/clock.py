"""Clock adapters. The engine only learns the current time through these."""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockAdapter(Protocol):
    def now(self) -> int:
        """Current instant in epoch milliseconds."""
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> int:
        return time.time_ns() // 1_000_000


class ManualClock:
    """Deterministic clock driven by the caller.

    Moving backwards raises ``ValueError`` unless ``allow_regression`` is set,
    which is how tests simulate a system clock being set back.
    """

    def __init__(self, start: int = 0, allow_regression: bool = False) -> None:
        if start < 0:
            raise ValueError("start must be non-negative")
        self._now = start
        self._allow_regression = allow_regression

    def now(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        if ms < 0 and not self._allow_regression:
            raise ValueError("cannot advance by a negative duration")
        self._now += ms
        return self._now

    def set(self, instant: int) -> None:
        if instant < self._now and not self._allow_regression:
            raise ValueError(
                f"cannot move clock back from {self._now} to {instant}"
            )
        self._now = instant


def elapsed_since(clock: ClockAdapter, instant: int) -> int:
    return clock.now() - instant
