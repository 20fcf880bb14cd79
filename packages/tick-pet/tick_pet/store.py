"""Persistence seam: where the host keeps snapshots between runs.

The engine never calls these; the host loads at startup, feeds the result
through ``PetEngine.advance`` and saves after every result.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from tick_pet.config import DEFAULT_CONFIG, PetConfig
from tick_pet.snapshot import PetSnapshot, snapshot_from_dict, snapshot_to_dict
from tick_pet.types import CorruptSnapshotError

if TYPE_CHECKING:
    from tick_pet.engine import PetEngine, StepResult

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    def load(self) -> PetSnapshot | None: ...

    def save(self, snapshot: PetSnapshot) -> None: ...


class MemoryStore:
    """Keeps the serialized dict in memory, so it goes through the same codec."""

    def __init__(self, config: PetConfig = DEFAULT_CONFIG) -> None:
        self._config = config
        self.data: dict[str, Any] | None = None

    def load(self) -> PetSnapshot | None:
        if self.data is None:
            return None
        return snapshot_from_dict(self.data, self._config)

    def save(self, snapshot: PetSnapshot) -> None:
        self.data = snapshot_to_dict(snapshot)


class JsonFileStore:
    def __init__(self, path: str | os.PathLike[str], config: PetConfig = DEFAULT_CONFIG) -> None:
        self._path = Path(path)
        self._config = config

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PetSnapshot | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (ValueError, UnicodeDecodeError) as exc:
            raise CorruptSnapshotError(f"{self._path}: not valid JSON ({exc})") from exc
        return snapshot_from_dict(data, self._config)

    def save(self, snapshot: PetSnapshot) -> None:
        """Write atomically: a temp file in the same directory, then rename."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(snapshot_to_dict(snapshot), indent=2, sort_keys=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=self._path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, self._path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


def load_or_create(store: SnapshotStore, engine: PetEngine, now: int | None = None) -> StepResult:
    """Startup path: load (or start fresh on corrupt data), then catch up to *now*."""
    try:
        snapshot = store.load()
    except CorruptSnapshotError as exc:
        logger.warning("stored snapshot is corrupt, starting a new pet: %s", exc)
        snapshot = None
    if snapshot is None:
        snapshot = engine.create(now)
    return engine.advance(snapshot, now)
