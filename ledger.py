from __future__ import annotations

import logging
from datetime import datetime, time
from threading import Lock
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from models import Booking, Interval, format_local_timestamp
from results import ErrorCode, Result

logger = logging.getLogger(__name__)

DEFAULT_WORK_START = time(8, 0)
DEFAULT_WORK_END = time(18, 0)


class BookingLedger:
    """
    Accepted bookings, indexed by id, by room and by requester.

    All three maps are mutated together under one lock, and every read takes
    the same lock, so no caller ever sees a half-applied insert or removal.
    Within each index, bookings are kept in acceptance order.
    """

    def __init__(
        self,
        work_start: time = DEFAULT_WORK_START,
        work_end: time = DEFAULT_WORK_END,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if not work_start < work_end:
            raise ValueError("work_start must be before work_end")
        self._work_start = work_start
        self._work_end = work_end
        self._clock = clock
        self._items: Dict[str, Booking] = {}
        self._by_resource: Dict[str, Dict[str, Booking]] = {}
        self._by_requester: Dict[str, Dict[str, Booking]] = {}
        self._lock = Lock()

    # -----------------------------
    # Reads
    # -----------------------------
    def is_available(self, resource_id: str, interval: Interval) -> bool:
        with self._lock:
            return self._find_conflict(resource_id, interval) is None

    def get(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            return self._items.get(booking_id)

    def bookings_on(self, resource_id: str) -> List[Booking]:
        with self._lock:
            return list(self._by_resource.get(resource_id, {}).values())

    def bookings_for(self, requester_id: str) -> List[Booking]:
        with self._lock:
            return list(self._by_requester.get(requester_id, {}).values())

    def all_bookings(self) -> List[Booking]:
        with self._lock:
            return list(self._items.values())

    # -----------------------------
    # Writes
    # -----------------------------
    def create_booking(
        self,
        requester_id: str,
        resource_id: str,
        interval: Interval,
        resource_exists: Callable[[str], bool],
    ) -> Result[Booking]:
        # Rule: start must be before end
        if not interval.is_well_formed:
            return self._reject(ErrorCode.INVALID_INTERVAL, "Invalid time range (start must be before end).")

        # Rule: bookings cannot be in the past (start >= now)
        if interval.start < self._clock():
            return self._reject(ErrorCode.PAST_BOOKING, "Cannot book in the past.")

        if not self._within_business_hours(interval):
            return self._reject(
                ErrorCode.OUTSIDE_BUSINESS_HOURS,
                f"Booking is outside business hours: "
                f"{self._work_start:%H:%M} - {self._work_end:%H:%M}",
            )

        # Rooms are never removed, so this lookup is safe to do before taking
        # the lock, and the catalog is never called while we hold it.
        if not resource_exists(resource_id):
            return self._reject(
                ErrorCode.RESOURCE_NOT_FOUND,
                f"Room id not found: {resource_id}",
                resource_id=resource_id,
            )

        with self._lock:
            conflict = self._find_conflict(resource_id, interval)
            if conflict is not None:
                return self._reject(
                    ErrorCode.OVERLAP_CONFLICT,
                    f"Room already booked in overlapping time by bookingId={conflict.booking_id}",
                    conflicting_booking_id=conflict.booking_id,
                )

            booking = Booking(
                booking_id=self._new_id(),
                resource_id=resource_id,
                requester_id=requester_id,
                interval=interval,
                created_at=self._clock(),
            )
            self._insert(booking)

        logger.info(
            "Booked %s for %s on %s [%s, %s)",
            booking.booking_id,
            requester_id,
            resource_id,
            format_local_timestamp(interval.start),
            format_local_timestamp(interval.end),
        )
        return Result.success(booking)

    def cancel_booking(self, booking_id: str, requester_id: str) -> Result[None]:
        with self._lock:
            booking = self._items.get(booking_id)
            if booking is None:
                return self._reject(ErrorCode.NOT_FOUND, f"Booking not found: {booking_id}")
            # Only the requester who created the booking may cancel it.
            if booking.requester_id != requester_id:
                return self._reject(
                    ErrorCode.NOT_OWNER,
                    "Only the user who created the booking can cancel it.",
                    booking_id=booking_id,
                )
            self._remove(booking)

        logger.info("Cancelled booking %s on %s", booking_id, booking.resource_id)
        return Result.success()

    # -----------------------------
    # Internals (caller holds the lock)
    # -----------------------------
    def _find_conflict(self, resource_id: str, interval: Interval) -> Optional[Booking]:
        for existing in self._by_resource.get(resource_id, {}).values():
            if existing.overlaps(interval):
                return existing
        return None

    def _insert(self, booking: Booking) -> None:
        assert self._find_conflict(booking.resource_id, booking.interval) is None, "overlapping insert"
        self._items[booking.booking_id] = booking
        self._by_resource.setdefault(booking.resource_id, {})[booking.booking_id] = booking
        self._by_requester.setdefault(booking.requester_id, {})[booking.booking_id] = booking

    def _remove(self, booking: Booking) -> None:
        del self._items[booking.booking_id]
        for index, key in ((self._by_resource, booking.resource_id), (self._by_requester, booking.requester_id)):
            bucket = index[key]
            del bucket[booking.booking_id]
            if not bucket:
                del index[key]

    def _new_id(self) -> str:
        return f"bkg_{uuid4().hex}"

    def _within_business_hours(self, interval: Interval) -> bool:
        # Clock times only; the dates of start and end are not compared.
        return interval.start.time() >= self._work_start and interval.end.time() <= self._work_end

    @staticmethod
    def _reject(code: ErrorCode, message: str, **detail) -> Result:
        logger.debug("Rejected: %s (%s)", message, code.value)
        return Result.failure(code, message, **detail)
