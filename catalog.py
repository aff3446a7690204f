from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, FrozenSet, Iterable, List, Optional
from uuid import uuid4

from models import Resource
from results import ErrorCode, Result

logger = logging.getLogger(__name__)


def normalize_tags(tags: Iterable[str]) -> FrozenSet[str]:
    """Strip surrounding whitespace and drop blank tags."""
    return frozenset(tag.strip() for tag in tags if tag and tag.strip())


class ResourceCatalog:
    """Registered rooms and their static attributes.

    Rooms are immutable once registered and are never removed, so a
    ``resource_exists`` answer never goes stale.
    """

    def __init__(self) -> None:
        self._items: Dict[str, Resource] = {}
        self._lock = Lock()

    def register(
        self,
        display_name: str,
        capacity: int,
        equipment: Iterable[str] = (),
        location: str = "",
    ) -> Result[Resource]:
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            return Result.failure(
                ErrorCode.INVALID_INPUT,
                "Capacity must be a positive integer.",
                capacity=capacity,
            )
        if not display_name or not display_name.strip():
            return Result.failure(ErrorCode.INVALID_INPUT, "Display name must not be blank.")

        tags = normalize_tags(equipment)
        with self._lock:
            resource_id = self._new_id()
            resource = Resource(
                resource_id=resource_id,
                display_name=display_name.strip(),
                capacity=capacity,
                equipment=tags,
                location=location,
            )
            self._items[resource_id] = resource

        logger.info("Registered room %s (%s, capacity=%d)", resource_id, resource.display_name, capacity)
        return Result.success(resource)

    def _new_id(self) -> str:
        # Caller holds the lock.
        while True:
            resource_id = f"room_{uuid4().hex[:8]}"
            if resource_id not in self._items:
                return resource_id

    def get(self, resource_id: str) -> Optional[Resource]:
        with self._lock:
            return self._items.get(resource_id)

    def resource_exists(self, resource_id: str) -> bool:
        with self._lock:
            return resource_id in self._items

    def list_all(self) -> List[Resource]:
        with self._lock:
            return list(self._items.values())

    def find_matching(self, min_capacity: int, required_equipment: Iterable[str] = ()) -> List[Resource]:
        """
        Rooms with capacity >= min_capacity whose equipment covers every
        required tag, smallest first. Ties keep registration order.
        """
        required = normalize_tags(required_equipment)
        matches = [
            r for r in self.list_all()
            if r.capacity >= min_capacity and r.has_equipment(required)
        ]
        # sort() is stable, and list_all() is in registration order.
        matches.sort(key=lambda r: r.capacity)
        return matches
