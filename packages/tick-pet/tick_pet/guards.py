"""InteractionGuards registry for interaction availability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tick_pet.types import ACTIVITY_NONE, SLEEPING

if TYPE_CHECKING:
    from tick_pet.config import PetConfig
    from tick_pet.snapshot import PetSnapshot

GuardFn = Callable[["PetSnapshot", "PetConfig"], bool]


class InteractionGuards:
    """Maps guard name strings to blocking predicates."""

    def __init__(self) -> None:
        self._guards: dict[str, GuardFn] = {}

    def register(self, name: str, fn: GuardFn) -> None:
        """Register a named guard. Overwrites if already registered."""
        self._guards[name] = fn

    def check(self, name: str, snapshot: PetSnapshot, config: PetConfig) -> bool:
        """Evaluate a guard. Raises KeyError if not registered."""
        return self._guards[name](snapshot, config)

    def has(self, name: str) -> bool:
        return name in self._guards

    def names(self) -> list[str]:
        return list(self._guards)


def default_guards() -> InteractionGuards:
    guards = InteractionGuards()
    guards.register("sleeping", lambda s, c: s.activity == SLEEPING)
    guards.register("awake", lambda s, c: s.activity != SLEEPING)
    guards.register("busy", lambda s, c: s.activity not in (ACTIVITY_NONE, SLEEPING))
    guards.register("low_energy", lambda s, c: s.stats["energy"] < c.min_play_energy)
    guards.register("healthy", lambda s, c: s.stats["health"] >= c.healthy_threshold)
    return guards
