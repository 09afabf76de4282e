from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal

from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.station_repository import StationRepositoryPort
from app.domain.entities.service import Service
from app.domain.entities.station import Station

logger = logging.getLogger(__name__)

DEMO_OWNER_ID = "2"

DEMO_STATIONS: tuple[Station, ...] = (
    Station(
        id="1",
        name="Premium Grooming Hub",
        address="123 Main St, Downtown",
        rating=4.8,
        owner_id=DEMO_OWNER_ID,
        services=(
            Service(id="s1", name="Haircut & Styling", duration_minutes=45, price=Decimal("35")),
            Service(id="s2", name="Beard Trim", duration_minutes=20, price=Decimal("15")),
            Service(id="s3", name="Hot Towel Shave", duration_minutes=30, price=Decimal("25")),
        ),
    ),
    Station(
        id="2",
        name="Modern Cuts Studio",
        address="456 Oak Ave, Midtown",
        rating=4.6,
        owner_id=DEMO_OWNER_ID,
        services=(
            Service(id="s4", name="Classic Cut", duration_minutes=30, price=Decimal("28")),
            Service(id="s5", name="Wash & Style", duration_minutes=40, price=Decimal("32")),
            Service(id="s6", name="Facial Treatment", duration_minutes=60, price=Decimal("45")),
        ),
    ),
    Station(
        id="3",
        name="Luxury Grooming Lounge",
        address="789 Pine St, Uptown",
        rating=4.9,
        owner_id=DEMO_OWNER_ID,
        services=(
            Service(id="s7", name="Executive Package", duration_minutes=90, price=Decimal("75")),
            Service(id="s8", name="Mustache Styling", duration_minutes=15, price=Decimal("12")),
            Service(id="s9", name="Scalp Treatment", duration_minutes=45, price=Decimal("38")),
        ),
    ),
)

# Day offset from the seeding date -> open times
DEMO_AVAILABILITY: dict[str, dict[int, list[str]]] = {
    "1": {
        1: ["09:00", "10:00", "11:00", "14:00", "15:00", "16:00"],
        2: ["09:00", "10:00", "13:00", "14:00", "15:00"],
        3: ["10:00", "11:00", "14:00", "15:00", "16:00", "17:00"],
    },
    "2": {
        1: ["08:00", "09:00", "10:00", "13:00", "14:00"],
        2: ["09:00", "11:00", "12:00", "15:00", "16:00"],
        3: ["08:00", "09:00", "13:00", "14:00", "15:00"],
    },
    "3": {
        1: ["10:00", "12:00", "14:00", "16:00"],
        2: ["09:00", "11:00", "13:00", "15:00"],
        3: ["10:00", "12:00", "14:00", "16:00", "18:00"],
    },
}


def seed_demo_data(
    stations: StationRepositoryPort,
    availability: AvailabilityStorePort,
    today: date | None = None,
) -> None:
    """Load the demo stations and open slots for the next three days. Existing stations are left alone."""
    start = today or date.today()
    for station in DEMO_STATIONS:
        if stations.get(station.id) is not None:
            continue
        stations.save(station)
        if availability.list_dates(station.id):
            # Persisted availability already reflects bookings; do not reopen slots.
            continue
        for offset, slots in DEMO_AVAILABILITY.get(station.id, {}).items():
            availability.publish_slots(station.id, start + timedelta(days=offset), slots)
    logger.info("Demo stations seeded", extra={"reason": f"count={len(DEMO_STATIONS)}"})
