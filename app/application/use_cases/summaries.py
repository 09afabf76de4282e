from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.booking import Booking, BookingStatus


@dataclass(frozen=True)
class CustomerSummary:
    total_bookings: int
    completed_bookings: int
    rewards_collected: int


@dataclass(frozen=True)
class StationSummary:
    station_id: str
    total_bookings: int
    completed_bookings: int
    revenue: Decimal


def summarize_customer(bookings: Iterable[Booking]) -> CustomerSummary:
    """Counts over every booking the customer ever made, cancelled ones included."""
    bookings = list(bookings)
    return CustomerSummary(
        total_bookings=len(bookings),
        completed_bookings=sum(1 for b in bookings if b.status == BookingStatus.completed),
        rewards_collected=sum(1 for b in bookings if b.reward_issued),
    )


def summarize_station(station_id: str, bookings: Iterable[Booking]) -> StationSummary:
    """Revenue is the snapshot price of every booking that was not cancelled."""
    bookings = list(bookings)
    return StationSummary(
        station_id=station_id,
        total_bookings=len(bookings),
        completed_bookings=sum(1 for b in bookings if b.status == BookingStatus.completed),
        revenue=sum((b.total_price for b in bookings if b.status != BookingStatus.cancelled), Decimal("0")),
    )
