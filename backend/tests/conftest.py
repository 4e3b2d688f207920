import threading

import pytest

from app.errors import PersistenceError
from app.registry import RoomRegistry


class MemorySnapshotStore:
    """In-memory stand-in for a snapshot store; records every save."""

    def __init__(self, rooms=()):
        self.rooms = list(rooms)
        self.saves = []

    def load(self):
        return list(self.rooms)

    def save(self, rooms):
        self.rooms = list(rooms)
        self.saves.append(list(rooms))


class BrokenSnapshotStore:
    """Every read and write fails."""

    def __init__(self):
        self.save_attempts = 0
        self._lock = threading.Lock()

    def load(self):
        raise PersistenceError("disk on fire")

    def save(self, rooms):
        with self._lock:
            self.save_attempts += 1
        raise PersistenceError("disk on fire")


@pytest.fixture
def store():
    return MemorySnapshotStore()


@pytest.fixture
def registry(store):
    """Registry seeded with the five default rooms."""
    return RoomRegistry.initialize(store)


def numbers(rooms):
    return [r.room_number for r in rooms]
