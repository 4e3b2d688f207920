"""
Room snapshot stores.

A store mirrors the registry's room list: `load()` once at startup,
`save(rooms)` after every successful add. Both raise `PersistenceError`
on I/O failure and nothing else.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError

from app.config import Settings
from app.errors import PersistenceError
from app.models.room import Room

logger = logging.getLogger(__name__)

_rooms_adapter = TypeAdapter(List[Room])


class SnapshotStore(Protocol):
    def load(self) -> List[Room]: ...

    def save(self, rooms: Sequence[Room]) -> None: ...


class JsonFileSnapshotStore:
    """JSON array of room records on the local disk."""

    def __init__(self, path):
        self.path = Path(path)

    def __repr__(self):
        return f"JsonFileSnapshotStore({str(self.path)!r})"

    def load(self) -> List[Room]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"cannot read {self.path}: {e}") from e
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise PersistenceError(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise PersistenceError(f"{self.path} does not hold a JSON array")

        # 잘못된 항목은 건너뛰고 나머지만 살린다
        rooms: List[Room] = []
        for i, entry in enumerate(data):
            try:
                rooms.append(Room.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping snapshot entry #%d in %s: %s", i, self.path, e.errors()[0]["msg"])
        return rooms

    def save(self, rooms: Sequence[Room]) -> None:
        payload = _rooms_adapter.dump_json(list(rooms), by_alias=True, indent=2)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(payload)
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceError(f"cannot write {self.path}: {e}") from e


def build_store(settings: Settings) -> SnapshotStore:
    if settings.snapshot_backend == "postgres":
        from app.db.room_repo import PostgresSnapshotStore

        return PostgresSnapshotStore(settings)
    return JsonFileSnapshotStore(settings.snapshot_path)
