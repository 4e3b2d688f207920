"""
In-memory room registry.

Owns the room list for the lifetime of the process. Every operation runs
under one lock; a successful add rewrites the snapshot before the lock is
released, so snapshot writes never interleave.
"""
from __future__ import annotations

import logging
import threading
from typing import Iterable, List

from app.db.snapshot import SnapshotStore
from app.errors import PersistenceError, RoomValidationError
from app.models.room import AllocationResult, Room

logger = logging.getLogger(__name__)


SEED_ROOMS = (
    Room(room_number="101", capacity=1, has_ac=True, has_attached_washroom=True),
    Room(room_number="102", capacity=2, has_ac=False, has_attached_washroom=True),
    Room(room_number="103", capacity=4, has_ac=True, has_attached_washroom=False),
    Room(room_number="104", capacity=2, has_ac=True, has_attached_washroom=True),
    Room(room_number="201", capacity=6, has_ac=False, has_attached_washroom=False),
)


def _is_int(v) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


class RoomRegistry:
    def __init__(self, store: SnapshotStore, rooms: Iterable[Room] = ()):
        self._store = store
        self._rooms: List[Room] = list(rooms)
        self._lock = threading.Lock()

    @classmethod
    def initialize(cls, store: SnapshotStore) -> "RoomRegistry":
        """Load the snapshot, or install the seed rooms and write them back."""
        try:
            loaded = store.load()
        except PersistenceError as e:
            logger.warning("Snapshot unreadable (%s), falling back to seed rooms", e)
            loaded = []

        rooms: List[Room] = []
        seen = set()
        for room in loaded:
            if room.key in seen:
                logger.warning("Dropping duplicate room %r from snapshot", room.room_number)
                continue
            seen.add(room.key)
            rooms.append(room)

        registry = cls(store, rooms)
        if rooms:
            logger.info("Loaded %d rooms from %r", len(rooms), store)
            return registry

        logger.info("Installing %d seed rooms into %r", len(SEED_ROOMS), store)
        with registry._lock:
            registry._rooms = list(SEED_ROOMS)
            registry._persist()
        return registry

    def add_room(self, room_number: str, capacity: int, has_ac: bool, has_attached_washroom: bool) -> bool:
        """Append a new room. False when the input is invalid or the number is taken."""
        if not isinstance(room_number, str) or not _is_int(capacity):
            return False
        if not isinstance(has_ac, bool) or not isinstance(has_attached_washroom, bool):
            return False
        number = room_number.strip()
        if not number or capacity < 1:
            return False

        room = Room(
            room_number=number,
            capacity=capacity,
            has_ac=has_ac,
            has_attached_washroom=has_attached_washroom,
        )
        with self._lock:
            if any(r.key == room.key for r in self._rooms):
                return False
            self._rooms.append(room)
            self._persist()
        return True

    def list_rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms)

    def search_rooms(self, min_capacity: int, require_ac: bool = False, require_washroom: bool = False) -> List[Room]:
        """Rooms that fit, smallest capacity first, then by room number."""
        with self._lock:
            return self._search(min_capacity, require_ac, require_washroom)

    def allocate_room(self, students: int, needs_ac: bool = False, needs_washroom: bool = False) -> AllocationResult:
        """Best-fit pick. Read-only: the chosen room is not reserved."""
        if not _is_int(students) or students < 1:
            raise RoomValidationError("students must be >= 1")

        with self._lock:
            candidates = self._search(students, needs_ac, needs_washroom)
        if not candidates:
            return AllocationResult.no_match()
        # min() keeps the first of equal capacities, i.e. the lowest room number
        return AllocationResult.of(min(candidates, key=lambda r: r.capacity))

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    # caller holds self._lock
    def _search(self, min_capacity, require_ac, require_washroom) -> List[Room]:
        matches = [
            r for r in self._rooms
            if r.capacity >= min_capacity
            and (not require_ac or r.has_ac)
            and (not require_washroom or r.has_attached_washroom)
        ]
        matches.sort(key=lambda r: (r.capacity, r.room_number))
        return matches

    # caller holds self._lock
    def _persist(self) -> None:
        try:
            self._store.save(self._rooms)
        except PersistenceError as e:
            logger.warning("Snapshot write to %r failed, keeping in-memory state: %s", self._store, e)
