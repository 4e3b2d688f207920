import logging
from typing import List, Sequence

import psycopg2

from app.config import Settings
from app.errors import PersistenceError
from app.models.room import Room
from .db_connect import get_conn

logger = logging.getLogger(__name__)


CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS hostel_room (
        position INTEGER PRIMARY KEY,
        room_number TEXT NOT NULL,
        capacity INTEGER NOT NULL CHECK (capacity >= 1),
        has_ac BOOLEAN NOT NULL DEFAULT FALSE,
        has_attached_washroom BOOLEAN NOT NULL DEFAULT FALSE
    )
"""


def _rollback(conn) -> None:
    """Rollback that never masks the original error."""
    try:
        conn.rollback()
    except psycopg2.Error as e:
        logger.warning("Rollback failed: %s", e)


class PostgresSnapshotStore:
    """Room snapshot kept in the `hostel_room` table.

    The whole table is rewritten on every save; `position` keeps the
    registry's insertion order.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def __repr__(self):
        return f"PostgresSnapshotStore({self.settings.db_host}/{self.settings.db_name})"

    def load(self) -> List[Room]:
        conn = get_conn(self.settings)
        try:
            cur = conn.cursor()
            cur.execute(CREATE_TABLE_SQL)
            cur.execute("""
                SELECT room_number, capacity, has_ac, has_attached_washroom
                FROM hostel_room
                ORDER BY position
            """)
            rows = cur.fetchall()
            conn.commit()
            cur.close()
        except psycopg2.Error as e:
            _rollback(conn)
            raise PersistenceError(f"failed to read rooms from database: {e}") from e
        finally:
            conn.close()

        rooms = []
        for room_number, capacity, has_ac, washroom in rows:
            if not str(room_number or "").strip() or capacity is None or capacity < 1:
                logger.warning("Skipping invalid hostel_room row %r", room_number)
                continue
            rooms.append(Room(
                room_number=room_number,
                capacity=capacity,
                has_ac=bool(has_ac),
                has_attached_washroom=bool(washroom),
            ))
        return rooms

    def save(self, rooms: Sequence[Room]) -> None:
        conn = get_conn(self.settings)
        try:
            cur = conn.cursor()
            cur.execute(CREATE_TABLE_SQL)
            cur.execute("DELETE FROM hostel_room")
            cur.executemany(
                """
                INSERT INTO hostel_room
                    (position, room_number, capacity, has_ac, has_attached_washroom)
                VALUES (%s, %s, %s, %s, %s)
                """,
                [
                    (i, r.room_number, r.capacity, r.has_ac, r.has_attached_washroom)
                    for i, r in enumerate(rooms)
                ],
            )
            conn.commit()
            cur.close()
        except psycopg2.Error as e:
            _rollback(conn)
            raise PersistenceError(f"failed to write rooms to database: {e}") from e
        finally:
            conn.close()
