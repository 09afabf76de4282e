from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.reward_policy import RewardPolicyPort
from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingLifecycleUseCase
from app.application.use_cases.stations import StationUseCase
from app.domain.entities.current_user import CurrentUser
from app.domain.entities.service import Service
from app.domain.entities.station import Station
from app.infrastructure.rewards.reward_policy import FixedRewardPolicy
from app.infrastructure.store.memory_availability_store import MemoryAvailabilityStore
from app.infrastructure.store.memory_store import (
    MemoryBookingRepository,
    MemoryDraftStore,
    MemoryReservationLedger,
    MemoryStationRepository,
)

TODAY = date(2025, 1, 10)
BOOKING_DAY = date(2025, 1, 15)
OWNER = CurrentUser(id="owner-1", role="owner")


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_station(station_id: str = "S1", owner_id: str = OWNER.id) -> Station:
    return Station(
        id=station_id,
        name="Premium Grooming Hub",
        address="123 Main St, Downtown",
        rating=4.8,
        owner_id=owner_id,
        services=(
            Service(id="s1", name="Haircut & Styling", duration_minutes=45, price=Decimal("35")),
            Service(id="s2", name="Beard Trim", duration_minutes=20, price=Decimal("15")),
            Service(id="s3", name="Hot Towel Shave", duration_minutes=30, price=Decimal("25.50")),
        ),
    )


@dataclass
class Engine:
    stations: MemoryStationRepository
    availability: AvailabilityStorePort
    bookings: BookingRepositoryPort
    drafts: MemoryDraftStore
    ledger: MemoryReservationLedger
    clock: FakeClock
    booking: BookingLifecycleUseCase
    slots: AvailabilityUseCase
    catalog: StationUseCase


def build_engine(
    availability: AvailabilityStorePort | None = None,
    bookings: BookingRepositoryPort | None = None,
    reward_policy: RewardPolicyPort | None = None,
    draft_ttl_seconds: float = 900,
    recovery_timeout_seconds: float = 300,
) -> Engine:
    stations = MemoryStationRepository([make_station()])
    availability = availability or MemoryAvailabilityStore()
    bookings = bookings or MemoryBookingRepository()
    drafts = MemoryDraftStore()
    ledger = MemoryReservationLedger()
    clock = FakeClock()
    return Engine(
        stations=stations,
        availability=availability,
        bookings=bookings,
        drafts=drafts,
        ledger=ledger,
        clock=clock,
        booking=BookingLifecycleUseCase(
            stations=stations,
            availability=availability,
            bookings=bookings,
            drafts=drafts,
            ledger=ledger,
            reward_policy=reward_policy or FixedRewardPolicy(False),
            draft_ttl_seconds=draft_ttl_seconds,
            recovery_timeout_seconds=recovery_timeout_seconds,
            clock=clock,
        ),
        slots=AvailabilityUseCase(stations=stations, store=availability, bookings=bookings),
        catalog=StationUseCase(stations=stations),
    )


@pytest.fixture
def engine() -> Engine:
    e = build_engine()
    e.availability.publish_slots("S1", BOOKING_DAY, ["09:00", "10:00"])
    return e
