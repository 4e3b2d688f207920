from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field


def _strip_room_number(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("room number must not be blank")
    return v


RoomNumber = Annotated[str, AfterValidator(_strip_room_number)]


class Room(BaseModel):
    """A sleeping room. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # "roomNo" is the key older snapshots were written with
    room_number: RoomNumber = Field(
        validation_alias=AliasChoices("roomNumber", "roomNo", "room_number"),
        serialization_alias="roomNumber",
    )
    capacity: int = Field(ge=1)
    has_ac: bool = Field(False, alias="hasAC")
    has_attached_washroom: bool = Field(False, alias="hasAttachedWashroom")

    @property
    def key(self) -> str:
        """Uniqueness key: trimmed and case-folded room number."""
        return self.room_number.strip().casefold()


class AllocationResult(BaseModel):
    """Outcome of an allocation: either a room was found or nothing fits."""

    model_config = ConfigDict(frozen=True)

    room: Optional[Room] = None

    @property
    def found(self) -> bool:
        return self.room is not None

    @classmethod
    def of(cls, room: Room) -> "AllocationResult":
        return cls(room=room)

    @classmethod
    def no_match(cls) -> "AllocationResult":
        return cls(room=None)


# ---------------------------------------------------------------
# Request / response bodies
# ---------------------------------------------------------------
class AddRoomRequest(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    room_number: RoomNumber = Field(validation_alias=AliasChoices("roomNumber", "roomNo"))
    capacity: int = Field(ge=1)
    has_ac: bool = Field(False, alias="hasAC")
    has_attached_washroom: bool = Field(False, alias="hasAttachedWashroom")


class AllocateRequest(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    students: int = Field(ge=1)
    needs_ac: bool = Field(False, alias="needsAC")
    needs_washroom: bool = Field(False, alias="needsWashroom")


class MessageOut(BaseModel):
    message: str
