"""tick-pet - A deterministic virtual pet simulation engine."""

from tick_pet.achievements import ACHIEVEMENTS, AchievementDef
from tick_pet.clock import ClockAdapter, ManualClock, SystemClock
from tick_pet.config import DEFAULT_CONFIG, PetConfig
from tick_pet.engine import PetEngine, StepResult, advance, interact
from tick_pet.events import Event
from tick_pet.growth import StageDef, resolve_stage
from tick_pet.mood import resolve_mood
from tick_pet.replay import Call, replay
from tick_pet.snapshot import PetSnapshot, new_snapshot, snapshot_from_dict, snapshot_to_dict
from tick_pet.stats import DecayRates, InteractionDef
from tick_pet.store import JsonFileStore, MemoryStore, load_or_create
from tick_pet.types import (
    CorruptSnapshotError,
    InteractionError,
    InvalidElapsedTimeError,
    PetError,
)

__all__ = [
    "PetEngine",
    "StepResult",
    "advance",
    "interact",
    "PetSnapshot",
    "new_snapshot",
    "snapshot_to_dict",
    "snapshot_from_dict",
    "PetConfig",
    "DEFAULT_CONFIG",
    "DecayRates",
    "InteractionDef",
    "StageDef",
    "resolve_stage",
    "resolve_mood",
    "ACHIEVEMENTS",
    "AchievementDef",
    "ClockAdapter",
    "SystemClock",
    "ManualClock",
    "Event",
    "Call",
    "replay",
    "JsonFileStore",
    "MemoryStore",
    "load_or_create",
    "PetError",
    "InteractionError",
    "InvalidElapsedTimeError",
    "CorruptSnapshotError",
]
