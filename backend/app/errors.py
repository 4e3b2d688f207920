from __future__ import annotations


class HostelError(Exception):
    """Base error for the hostel API.

    `status_code` and `code` are what the HTTP layer renders; the message is
    the human readable part of the response body.
    """

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class RoomValidationError(HostelError):
    status_code = 400
    code = "invalid_input"


class RoomConflictError(HostelError):
    status_code = 409
    code = "room_exists"


class RoomNotFoundError(HostelError):
    status_code = 404
    code = "no_room_available"


class PersistenceError(HostelError):
    """Snapshot read/write failure. Absorbed by the registry, never rendered."""

    code = "persistence_error"
