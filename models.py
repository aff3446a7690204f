from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, List

from pydantic import BaseModel, Field, field_validator


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


# -----------------------------
# Shared time helpers
# -----------------------------
def parse_local_timestamp(ts: str) -> datetime:
    """
    Parse a 'YYYY-MM-DD HH:MM' timestamp into a naive local datetime.
    """
    if not isinstance(ts, str) or not ts.strip():
        raise ValueError("timestamp must be a non-empty string")
    try:
        return datetime.strptime(ts.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        raise ValueError("timestamp must match YYYY-MM-DD HH:MM") from None


def format_local_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    Half-open interval overlap: [start, end)
    Overlap iff a_start < b_end AND b_start < a_end.
    Back-to-back is allowed (end == other.start is NOT overlap).
    """
    return a_start < b_end and b_start < a_end


# -----------------------------
# Domain model
# -----------------------------
@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime

    @property
    def is_well_formed(self) -> bool:
        return self.start < self.end

    def overlaps(self, other: Interval) -> bool:
        return intervals_overlap(self.start, self.end, other.start, other.end)


@dataclass(frozen=True)
class Resource:
    resource_id: str
    display_name: str
    capacity: int
    equipment: FrozenSet[str] = field(default_factory=frozenset)
    location: str = ""

    def has_equipment(self, required: FrozenSet[str]) -> bool:
        return self.equipment >= required


@dataclass(frozen=True)
class Requester:
    requester_id: str
    display_name: str


@dataclass(frozen=True)
class Booking:
    booking_id: str
    resource_id: str
    requester_id: str
    interval: Interval
    created_at: datetime

    def overlaps(self, interval: Interval) -> bool:
        return self.interval.overlaps(interval)


# -----------------------------
# API models (transport layer)
# -----------------------------
class RegisterRoomIn(BaseModel):
    display_name: str = Field(..., min_length=1)
    capacity: int
    equipment: List[str] = Field(default_factory=list)
    location: str = ""


class RoomOut(BaseModel):
    room_id: str
    display_name: str
    capacity: int
    equipment: List[str]
    location: str

    @classmethod
    def from_resource(cls, resource: Resource) -> RoomOut:
        return cls(
            room_id=resource.resource_id,
            display_name=resource.display_name,
            capacity=resource.capacity,
            equipment=sorted(resource.equipment),
            location=resource.location,
        )


class CreateBookingIn(BaseModel):
    requester_id: str = Field(..., min_length=1)
    room_id: str = Field(..., min_length=1)
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def must_be_local_timestamp(cls, v: str) -> str:
        # Validate format early; actual comparison happens in the ledger.
        parse_local_timestamp(v)
        return v

    def to_interval(self) -> Interval:
        return Interval(parse_local_timestamp(self.start), parse_local_timestamp(self.end))


class BookingOut(BaseModel):
    booking_id: str
    room_id: str
    requester_id: str
    start: str  # YYYY-MM-DD HH:MM, local clock
    end: str
    created_at: str

    @classmethod
    def from_booking(cls, booking: Booking) -> BookingOut:
        return cls(
            booking_id=booking.booking_id,
            room_id=booking.resource_id,
            requester_id=booking.requester_id,
            start=format_local_timestamp(booking.interval.start),
            end=format_local_timestamp(booking.interval.end),
            created_at=format_local_timestamp(booking.created_at),
        )
