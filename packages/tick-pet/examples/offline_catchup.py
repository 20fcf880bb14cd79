"""Offline catch-up -- close the app, come back hours later.

Demonstrates:
- Driving the engine from a ManualClock instead of wall time
- A short play session with feed/play/sleep
- A six-hour gap resolved in one advance() call
- Proving one large advance equals many small ones

Run: python -m examples.offline_catchup
"""

from tick_pet import ManualClock, PetEngine, StepResult

MIN = 60_000
HOUR = 60 * MIN


def show(label: str, result: StepResult) -> None:
    s = result.snapshot
    stats = " ".join(f"{k}={v:>3}" for k, v in s.display_stats().items())
    print(f"{label:<22} day {s.age_in_days:>3} {s.growth_stage:<6} {result.mood:<9} {stats}")
    for event in result.events:
        print(f"{'':<22}   -> {event.type} {event.data}")


def main() -> None:
    print("=== Offline Catch-up ===\n")

    clock = ManualClock(start=1_700_000_000_000)
    engine = PetEngine(clock=clock)
    pet = engine.create()

    # --- Phase 1: a short session ---
    for kind in ("feed", "play"):
        result = engine.interact(pet, kind)
        pet = result.snapshot
        show(kind, result)
        clock.advance(5_000)

    clock.advance(2 * MIN)
    result = engine.interact(pet, "sleep")
    pet = result.snapshot
    show("sleep", result)

    # --- Phase 2: app closed for six hours ---
    closed_at = pet
    clock.advance(6 * HOUR)
    result = engine.advance(pet)
    show("back after 6 hours", result)

    # --- Verify: same result in one-minute steps ---
    step = closed_at
    for minute in range(1, 6 * 60 + 1):
        step = engine.advance(step, closed_at.last_visited_at + minute * MIN).snapshot
    print()
    for name, value in result.snapshot.stats.items():
        assert abs(value - step.stats[name]) < 1e-6, f"{name}: {value} != {step.stats[name]}"
    print("One 6-hour advance matches 360 one-minute advances:  PASS")


if __name__ == "__main__":
    main()
