from __future__ import annotations

import threading
from dataclasses import replace

from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.draft_store import DraftStorePort
from app.application.ports.reservation_ledger import ReservationLedgerPort
from app.application.ports.station_repository import StationRepositoryPort
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.draft_selection import DraftSelection
from app.domain.entities.pending_reservation import PendingReservation
from app.domain.entities.service import Service
from app.domain.entities.station import Station


class MemoryStationRepository(StationRepositoryPort):
    def __init__(self, stations: list[Station] | None = None) -> None:
        self._stations: dict[str, Station] = {}
        self._lock = threading.Lock()
        for station in stations or []:
            self._stations[station.id] = station

    def get(self, station_id: str) -> Station | None:
        return self._stations.get(station_id)

    def list_all(self) -> list[Station]:
        return list(self._stations.values())

    def list_by_owner(self, owner_id: str) -> list[Station]:
        return [station for station in self._stations.values() if station.owner_id == owner_id]

    def save(self, station: Station) -> None:
        with self._lock:
            self._stations[station.id] = station

    def replace_services(self, station_id: str, services: tuple[Service, ...]) -> Station | None:
        with self._lock:
            station = self._stations.get(station_id)
            if station is None:
                return None
            updated = replace(station, services=tuple(services))
            self._stations[station_id] = updated
            return updated


class MemoryBookingRepository(BookingRepositoryPort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._by_customer: dict[str, list[str]] = {}
        self._by_slot: dict[tuple[str, str, str], list[str]] = {}
        self._lock = threading.Lock()

    def add(self, booking: Booking) -> None:
        with self._lock:
            if booking.id in self._bookings:
                raise ValueError(f"Booking {booking.id} already exists")
            self._bookings[booking.id] = booking
            self._by_customer.setdefault(booking.customer_id, []).append(booking.id)
            slot = (booking.station_id, booking.date, booking.time)
            self._by_slot.setdefault(slot, []).append(booking.id)

    def get(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def list_for_customer(self, customer_id: str) -> list[Booking]:
        with self._lock:
            return [self._bookings[i] for i in self._by_customer.get(customer_id, [])]

    def list_for_station(self, station_id: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if b.station_id == station_id]

    def find_active_for_slot(self, station_id: str, date: str, time: str) -> Booking | None:
        with self._lock:
            for booking_id in self._by_slot.get((station_id, date, time), []):
                booking = self._bookings[booking_id]
                if booking.is_active:
                    return booking
        return None

    def compare_and_set_status(
        self,
        booking_id: str,
        expected: BookingStatus,
        target: BookingStatus,
    ) -> Booking | None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None or booking.status != expected:
                return None
            updated = booking.with_status(target)
            self._bookings[booking_id] = updated
            return updated


class MemoryDraftStore(DraftStorePort):
    def __init__(self) -> None:
        self._drafts: dict[str, DraftSelection] = {}

    def get(self, customer_id: str) -> DraftSelection | None:
        return self._drafts.get(customer_id)

    def put(self, draft: DraftSelection) -> None:
        self._drafts[draft.customer_id] = draft

    def clear(self, customer_id: str) -> None:
        self._drafts.pop(customer_id, None)


class MemoryReservationLedger(ReservationLedgerPort):
    def __init__(self) -> None:
        self._pending: dict[str, PendingReservation] = {}
        self._lock = threading.Lock()

    def record(self, reservation: PendingReservation) -> None:
        with self._lock:
            self._pending[reservation.token] = reservation

    def discard(self, token: str) -> None:
        with self._lock:
            self._pending.pop(token, None)

    def list_older_than(self, cutoff_ts: float) -> list[PendingReservation]:
        with self._lock:
            return [r for r in self._pending.values() if r.reserved_at <= cutoff_ts]
