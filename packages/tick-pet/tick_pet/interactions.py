"""InteractionEngine - validate and apply user interactions."""

from __future__ import annotations

import logging

from tick_pet.config import DEFAULT_CONFIG, PetConfig
from tick_pet.decay import advance_to
from tick_pet.guards import InteractionGuards, default_guards
from tick_pet.snapshot import PetSnapshot
from tick_pet.stats import SLEEP, WAKE, InteractionDef, apply_effects
from tick_pet.types import ACTIVITY_NONE, SLEEPING, InteractionError

logger = logging.getLogger(__name__)

_DEFAULT_GUARDS = default_guards()


def resolve_kind(snapshot: PetSnapshot, kind: str, config: PetConfig = DEFAULT_CONFIG) -> str:
    """Sleep is a toggle: requesting it while asleep means waking up."""
    if kind == SLEEP and snapshot.activity == SLEEPING and WAKE in config.interactions:
        return WAKE
    return kind


def blocking_guard(
    snapshot: PetSnapshot,
    defn: InteractionDef,
    config: PetConfig = DEFAULT_CONFIG,
    guards: InteractionGuards | None = None,
) -> str | None:
    """Name of the first guard that blocks *defn*, or None if it is available."""
    guards = guards if guards is not None else _DEFAULT_GUARDS
    for name in defn.conditions:
        if guards.check(name, snapshot, config):
            return name
    return None


def apply_interaction(
    snapshot: PetSnapshot,
    kind: str,
    now: int,
    config: PetConfig = DEFAULT_CONFIG,
    guards: InteractionGuards | None = None,
) -> PetSnapshot:
    """Apply *kind* to an already-decayed snapshot.

    Raises InteractionError if the kind is unknown or blocked; *snapshot*
    itself is never modified.
    """
    requested = kind
    kind = resolve_kind(snapshot, kind, config)
    defn = config.interactions.get(kind)
    if defn is None:
        raise InteractionError("unknown", requested, snapshot.activity)

    guard = blocking_guard(snapshot, defn, config, guards)
    if guard is not None:
        logger.debug("interaction %s blocked by %s", requested, guard)
        raise InteractionError("blocked", requested, snapshot.activity, guard=guard)

    stats = apply_effects(snapshot.stats, defn.deltas, defn.sets)
    counters = dict(snapshot.counters)
    if defn.counter:
        counters[defn.counter] = counters.get(defn.counter, 0) + 1
    counters["interactions"] = counters.get("interactions", 0) + 1

    if defn.activity == ACTIVITY_NONE or defn.duration_ms is None:
        ends_at = None
    else:
        ends_at = now + defn.duration_ms

    if defn.activity == SLEEPING:
        logger.info("pet fell asleep at %d", now)
    elif kind == WAKE:
        logger.info("pet woken at %d", now)

    return snapshot.evolve(
        stats=stats,
        counters=counters,
        activity=defn.activity,
        activity_ends_at=ends_at,
        last_interaction_at=now,
    )


def interact(
    snapshot: PetSnapshot,
    kind: str,
    now: int,
    config: PetConfig = DEFAULT_CONFIG,
    guards: InteractionGuards | None = None,
) -> PetSnapshot:
    """Catch decay up to *now*, then apply *kind*.

    Effects are never computed on stale stats. Raises InteractionError or
    InvalidElapsedTimeError (when *now* precedes the last visit).
    """
    if kind not in config.interactions:
        raise InteractionError("unknown", kind, snapshot.activity)
    fresh = advance_to(snapshot, now, config)
    return apply_interaction(fresh, kind, now, config, guards)


def available_interactions(
    snapshot: PetSnapshot,
    config: PetConfig = DEFAULT_CONFIG,
    guards: InteractionGuards | None = None,
    now: int | None = None,
) -> list[str]:
    """Kinds that would be accepted, in table order.

    With *now* the snapshot is first caught up, so an activity that has
    already finished no longer blocks anything. A *now* before the last
    visit is ignored.
    """
    if now is not None and now > snapshot.last_visited_at:
        snapshot = advance_to(snapshot, now, config)
    out = []
    for kind in config.interactions:
        defn = config.interactions[resolve_kind(snapshot, kind, config)]
        if blocking_guard(snapshot, defn, config, guards) is None:
            out.append(kind)
    return out
