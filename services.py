from __future__ import annotations

from typing import Iterable, List, Optional

from catalog import ResourceCatalog
from ledger import BookingLedger
from models import Booking, Interval, Resource
from results import Result


class AvailabilitySearch:
    """Rooms matching static constraints that are also free for a window."""

    def __init__(self, catalog: ResourceCatalog, ledger: BookingLedger) -> None:
        self._catalog = catalog
        self._ledger = ledger

    def search(
        self,
        interval: Interval,
        min_capacity: int = 1,
        required_equipment: Iterable[str] = (),
    ) -> List[Resource]:
        candidates = self._catalog.find_matching(min_capacity, required_equipment)
        return [r for r in candidates if self._ledger.is_available(r.resource_id, interval)]


class BookingService:
    def __init__(self, catalog: ResourceCatalog, ledger: BookingLedger) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._search = AvailabilitySearch(catalog, ledger)

    def register_room(
        self,
        display_name: str,
        capacity: int,
        equipment: Iterable[str] = (),
        location: str = "",
    ) -> Result[Resource]:
        return self._catalog.register(display_name, capacity, equipment, location)

    def get_room(self, room_id: str) -> Optional[Resource]:
        return self._catalog.get(room_id)

    def list_rooms(self) -> List[Resource]:
        return self._catalog.list_all()

    def search(
        self,
        interval: Interval,
        min_capacity: int = 1,
        required_equipment: Iterable[str] = (),
    ) -> List[Resource]:
        return self._search.search(interval, min_capacity, required_equipment)

    def create_booking(self, requester_id: str, room_id: str, interval: Interval) -> Result[Booking]:
        return self._ledger.create_booking(
            requester_id,
            room_id,
            interval,
            resource_exists=self._catalog.resource_exists,
        )

    def cancel_booking(self, booking_id: str, requester_id: str) -> Result[None]:
        return self._ledger.cancel_booking(booking_id, requester_id)

    def list_bookings_for_room(self, room_id: str) -> List[Booking]:
        items = self._ledger.bookings_on(room_id)
        items.sort(key=lambda b: b.interval.start)
        return items

    def list_bookings_for_requester(self, requester_id: str) -> List[Booking]:
        items = self._ledger.bookings_for(requester_id)
        items.sort(key=lambda b: b.interval.start)
        return items
