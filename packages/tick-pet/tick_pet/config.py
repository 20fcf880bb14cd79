"""Tunable engine configuration."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Mapping

from tick_pet.growth import DEFAULT_STAGES, StageDef, validate_stages
from tick_pet.stats import DEFAULT_INTERACTIONS, DecayRates, InteractionDef

_TOP_LEVEL_KEYS = frozenset({
    "rates", "interactions", "stages", "mood_threshold", "happy_threshold",
    "bond_streak_threshold", "min_play_energy", "healthy_threshold",
})


@dataclass(frozen=True)
class PetConfig:
    """Everything the engine needs to know that is not in the snapshot.

    Rates and thresholds are configuration so they can be tuned for
    engagement without touching the simulation code.
    """

    rates: DecayRates = field(default_factory=DecayRates)
    interactions: Mapping[str, InteractionDef] = field(
        default_factory=lambda: dict(DEFAULT_INTERACTIONS)
    )
    stages: tuple[StageDef, ...] = DEFAULT_STAGES
    mood_threshold: float = 20.0  # any stat below this shapes the mood
    happy_threshold: float = 70.0
    bond_streak_threshold: float = 80.0
    min_play_energy: float = 10.0
    healthy_threshold: float = 80.0  # heal is refused at or above this

    def __post_init__(self) -> None:
        validate_stages(self.stages)
        for name in ("mood_threshold", "happy_threshold", "bond_streak_threshold",
                     "min_play_energy", "healthy_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"{name} must be within [0, 100], got {value!r}")
        for kind, defn in self.interactions.items():
            if defn.kind != kind:
                raise ValueError(f"interaction table key {kind!r} does not match kind {defn.kind!r}")

    @property
    def stage_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.stages)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PetConfig:
        """Build a config from a plain mapping of overrides (e.g. parsed JSON).

        Interaction overrides are merged field-by-field onto the default row
        of the same kind; new kinds must name their ``activity``.
        """
        unknown = set(data) - _TOP_LEVEL_KEYS
        if unknown:
            raise ValueError(f"unknown config keys: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        if "rates" in data:
            kwargs["rates"] = _replace(DecayRates(), data["rates"], "rates")
        if "interactions" in data:
            table = dict(DEFAULT_INTERACTIONS)
            for kind, row in data["interactions"].items():
                row = dict(row)
                if "conditions" in row:
                    row["conditions"] = tuple(row["conditions"])
                if kind in table:
                    table[kind] = _replace(table[kind], row, f"interactions.{kind}")
                else:
                    try:
                        table[kind] = InteractionDef(kind=kind, **row)
                    except TypeError as exc:
                        raise ValueError(f"invalid interaction {kind!r}: {exc}") from exc
            kwargs["interactions"] = table
        if "stages" in data:
            kwargs["stages"] = tuple(
                StageDef(name=s["name"], start=int(s["start"]),
                         end=None if s.get("end") is None else int(s["end"]))
                for s in data["stages"]
            )
        for key in _TOP_LEVEL_KEYS - {"rates", "interactions", "stages"}:
            if key in data:
                kwargs[key] = float(data[key])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rates": dataclasses.asdict(self.rates),
            "interactions": {
                kind: {
                    "activity": d.activity,
                    "deltas": dict(d.deltas),
                    "sets": dict(d.sets),
                    "duration_ms": d.duration_ms,
                    "conditions": list(d.conditions),
                    "counter": d.counter,
                    "restores": dict(d.restores),
                }
                for kind, d in self.interactions.items()
            },
            "stages": [{"name": s.name, "start": s.start, "end": s.end} for s in self.stages],
            "mood_threshold": self.mood_threshold,
            "happy_threshold": self.happy_threshold,
            "bond_streak_threshold": self.bond_streak_threshold,
            "min_play_energy": self.min_play_energy,
            "healthy_threshold": self.healthy_threshold,
        }


def _replace(obj: Any, overrides: Mapping[str, Any], where: str) -> Any:
    try:
        return dataclasses.replace(obj, **overrides)
    except TypeError as exc:
        raise ValueError(f"invalid {where} override: {exc}") from exc


DEFAULT_CONFIG = PetConfig()
