"""Shared pytest fixtures for the booking service tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from catalog import ResourceCatalog
from ledger import BookingLedger
from models import Interval
from services import BookingService

# Fixed "now" for ledger tests: the day before the dates the tests book.
NOW = datetime(2030, 1, 1, 9, 0)


def at(hhmm: str, day: int = 2) -> datetime:
    """A local timestamp on 2030-01-<day> at HH:MM."""
    hour, minute = (int(part) for part in hhmm.split(":"))
    return datetime(2030, 1, day, hour, minute)


def window(start: str, end: str, day: int = 2) -> Interval:
    return Interval(at(start, day), at(end, day))


@pytest.fixture
def catalog() -> ResourceCatalog:
    return ResourceCatalog()


@pytest.fixture
def ledger() -> BookingLedger:
    return BookingLedger(clock=lambda: NOW)


@pytest.fixture
def service(catalog: ResourceCatalog, ledger: BookingLedger) -> BookingService:
    return BookingService(catalog, ledger)


@pytest.fixture
def room(catalog: ResourceCatalog):
    return catalog.register("Orchid", 6, {"PROJECTOR", "WHITEBOARD"}, "Floor 1").unwrap()
