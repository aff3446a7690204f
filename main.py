from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from fastapi import FastAPI

from api import create_router
from catalog import ResourceCatalog
from ledger import BookingLedger
from logging_config import configure_logging
from models import Requester, Resource
from services import BookingService
from settings import BookingSettings

logger = logging.getLogger(__name__)


DEMO_REQUESTERS: Tuple[Requester, ...] = (
    Requester(requester_id="U1", display_name="Alice"),
    Requester(requester_id="U2", display_name="Bob"),
)

DEMO_ROOMS: Tuple[Tuple[str, int, Tuple[str, ...], str], ...] = (
    ("Orchid", 6, ("PROJECTOR", "WHITEBOARD"), "Floor 1"),
    ("Lotus", 12, ("VC", "PROJECTOR"), "Floor 2"),
    ("Iris", 4, ("WHITEBOARD",), "Floor 1"),
)


def seed_demo_data(service: BookingService) -> List[Resource]:
    rooms = [
        service.register_room(name, capacity, equipment, location).unwrap()
        for name, capacity, equipment, location in DEMO_ROOMS
    ]
    logger.info(
        "Seeded %d demo rooms; demo requesters: %s",
        len(rooms),
        ", ".join(f"{r.requester_id}={r.display_name}" for r in DEMO_REQUESTERS),
    )
    return rooms


def create_app(
    settings: Optional[BookingSettings] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FastAPI:
    settings = settings or BookingSettings()
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    catalog = ResourceCatalog()
    ledger = BookingLedger(work_start=settings.work_start, work_end=settings.work_end, clock=clock)
    service = BookingService(catalog, ledger)
    if settings.seed_demo_data:
        seed_demo_data(service)

    app = FastAPI(title="Meeting Room Booking API", version="1.0.0")
    app.include_router(create_router(service))
    return app


app = create_app()
