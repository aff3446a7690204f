from __future__ import annotations

from datetime import datetime
from typing import List, NoReturn, Optional

from fastapi import APIRouter, HTTPException, Path, Query, status

from models import (
    BookingOut,
    CreateBookingIn,
    Interval,
    RegisterRoomIn,
    RoomOut,
    parse_local_timestamp,
)
from results import BookingError, ErrorCode
from services import BookingService


_STATUS_BY_CODE = {
    ErrorCode.INVALID_INTERVAL: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorCode.PAST_BOOKING: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorCode.OUTSIDE_BUSINESS_HOURS: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorCode.INVALID_INPUT: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorCode.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.OVERLAP_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_OWNER: status.HTTP_403_FORBIDDEN,
}


def _raise_for(error: BookingError) -> NoReturn:
    raise HTTPException(
        status_code=_STATUS_BY_CODE[error.code],
        detail={"code": error.code.value, "message": error.message, **error.detail},
    )


def _parse_query_timestamp(name: str, value: str) -> datetime:
    try:
        return parse_local_timestamp(value)
    except ValueError as exc:
        _raise_for(BookingError(ErrorCode.INVALID_INPUT, f"Validation error: {name}: {exc}", {"field": name}))


def create_router(service: BookingService) -> APIRouter:
    router = APIRouter()

    @router.post("/rooms", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
    def register_room(payload: RegisterRoomIn) -> RoomOut:
        result = service.register_room(
            payload.display_name,
            payload.capacity,
            payload.equipment,
            payload.location,
        )
        if not result.ok:
            _raise_for(result.error)
        return RoomOut.from_resource(result.value)

    @router.get("/rooms", response_model=List[RoomOut])
    def list_rooms() -> List[RoomOut]:
        return [RoomOut.from_resource(r) for r in service.list_rooms()]

    @router.get("/rooms/{room_id}", response_model=RoomOut)
    def get_room(room_id: str = Path(..., min_length=1)) -> RoomOut:
        room = service.get_room(room_id)
        if room is None:
            _raise_for(BookingError(ErrorCode.RESOURCE_NOT_FOUND, "Room not found.", {"resource_id": room_id}))
        return RoomOut.from_resource(room)

    @router.get("/availability", response_model=List[RoomOut])
    def search_available_rooms(
        start: str = Query(...),
        end: str = Query(...),
        min_capacity: int = Query(1, ge=1),
        equipment: Optional[List[str]] = Query(None),
    ) -> List[RoomOut]:
        interval = Interval(_parse_query_timestamp("start", start), _parse_query_timestamp("end", end))
        if not interval.is_well_formed:
            _raise_for(BookingError(ErrorCode.INVALID_INTERVAL, "Validation error: start must be before end."))
        rooms = service.search(interval, min_capacity, equipment or [])
        return [RoomOut.from_resource(r) for r in rooms]

    @router.post("/bookings", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
    def create_booking(payload: CreateBookingIn) -> BookingOut:
        result = service.create_booking(payload.requester_id, payload.room_id, payload.to_interval())
        if not result.ok:
            _raise_for(result.error)
        return BookingOut.from_booking(result.value)

    @router.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
    def cancel_booking(
        booking_id: str = Path(..., min_length=1),
        requester_id: str = Query(..., min_length=1),
    ) -> None:
        result = service.cancel_booking(booking_id, requester_id)
        if not result.ok:
            _raise_for(result.error)
        return None

    @router.get("/rooms/{room_id}/bookings", response_model=List[BookingOut])
    def list_bookings_for_room(room_id: str = Path(..., min_length=1)) -> List[BookingOut]:
        return [BookingOut.from_booking(b) for b in service.list_bookings_for_room(room_id)]

    @router.get("/requesters/{requester_id}/bookings", response_model=List[BookingOut])
    def list_bookings_for_requester(requester_id: str = Path(..., min_length=1)) -> List[BookingOut]:
        return [BookingOut.from_booking(b) for b in service.list_bookings_for_requester(requester_id)]

    return router
