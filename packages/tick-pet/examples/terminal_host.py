"""Terminal host -- a persistent pet driven by wall-clock time.

Loads the pet from a JSON file (or hatches a new one), catches it up to
now, applies any requested interactions, prints its status and saves.
With --watch it keeps advancing every few seconds until interrupted.

Run:
    python -m examples.terminal_host [OPTIONS]

Options:
    --file       Snapshot path (default: pet.json)
    --do         Interaction to apply, repeatable (feed, play, clean, heal, sleep, wake)
    --watch      Keep advancing and printing until Ctrl-C
    --interval   Seconds between advances in watch mode (default: 5)
    --config     Optional JSON file with PetConfig overrides
    -v           Debug logging
"""
from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path

from tick_pet import (
    InteractionError,
    JsonFileStore,
    PetConfig,
    PetEngine,
    StepResult,
    load_or_create,
)


def render(result: StepResult, engine: PetEngine) -> str:
    s = result.snapshot
    lines = [f"[{s.growth_stage}, day {s.age_in_days}] mood: {result.mood}  activity: {s.activity}"]
    for name, value in s.display_stats().items():
        bar = "#" * (value // 5)
        lines.append(f"  {name:<12} {value:>3} {bar}")
    lines.append(f"  available: {', '.join(engine.available(s)) or '-'}")
    for achievement_id in result.unlocked:
        lines.append(f"  * achievement unlocked: {achievement_id}")
    if result.stage_changed is not None:
        lines.append(f"  * grew into a {result.stage_changed.data['current']}")
    return "\n".join(lines)


def main() -> None:
    parser = argparse.ArgumentParser(description="Virtual pet in the terminal")
    parser.add_argument("--file", default="pet.json")
    parser.add_argument("--do", action="append", default=[], metavar="KIND")
    parser.add_argument("--watch", action="store_true")
    parser.add_argument("--interval", type=float, default=5.0)
    parser.add_argument("--config", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = PetConfig()
    if args.config:
        config = PetConfig.from_dict(json.loads(Path(args.config).read_text(encoding="utf-8")))
    engine = PetEngine(config=config)
    store = JsonFileStore(args.file, config)

    result = load_or_create(store, engine)
    for kind in args.do:
        try:
            result = engine.interact(result.snapshot, kind)
        except InteractionError as exc:
            print(f"  ! {exc}")
    store.save(result.snapshot)
    print(render(result, engine))

    if not args.watch:
        return
    try:
        while True:
            time.sleep(args.interval)
            result = engine.advance(result.snapshot)
            store.save(result.snapshot)
            print()
            print(render(result, engine))
    except KeyboardInterrupt:
        store.save(result.snapshot)
        print("\nSaved. Bye!")


if __name__ == "__main__":
    main()
