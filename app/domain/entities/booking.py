from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from app.domain.entities.service import Service


class BookingStatus(str, Enum):
    pending = "pending"  # reserved for asynchronous payment flows
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return not BOOKING_TRANSITIONS[self]

    def can_transition_to(self, target: "BookingStatus") -> bool:
        return target in BOOKING_TRANSITIONS[self]


BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.pending: frozenset({BookingStatus.confirmed, BookingStatus.cancelled}),
    BookingStatus.confirmed: frozenset({BookingStatus.completed, BookingStatus.cancelled}),
    BookingStatus.completed: frozenset(),
    BookingStatus.cancelled: frozenset(),
}


@dataclass(frozen=True)
class Booking:
    id: str
    customer_id: str
    station_id: str
    station_name: str  # snapshot at confirmation time
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    services: tuple[Service, ...]
    total_price: Decimal
    total_duration_minutes: int
    status: BookingStatus = BookingStatus.confirmed
    reward_issued: bool = False
    created_at: float = 0.0

    @property
    def is_active(self) -> bool:
        return self.status in (BookingStatus.pending, BookingStatus.confirmed)

    def with_status(self, status: BookingStatus) -> "Booking":
        return replace(self, status=status)
