from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from app.application.exceptions import NotFound
from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.station_repository import StationRepositoryPort
from app.application.utils.authorization import require_owned_station
from app.application.utils.calendar import date_key, days_in_month, is_bookable, normalize_time_label
from app.domain.entities.current_user import CurrentUser


@dataclass(frozen=True)
class CalendarDay:
    date: date
    bookable: bool


class AvailabilityUseCase:
    """Read side of availability for everyone, write side for the station's owner."""

    def __init__(
        self,
        stations: StationRepositoryPort,
        store: AvailabilityStorePort,
        bookings: BookingRepositoryPort,
    ) -> None:
        self._stations = stations
        self._store = store
        self._bookings = bookings
        self._logger = logging.getLogger(__name__)

    def list_slots(self, station_id: str, day: date) -> list[str]:
        self._require_station(station_id)
        return self._store.list_slots(station_id, day)

    def list_dates(self, station_id: str) -> dict[str, list[str]]:
        self._require_station(station_id)
        return self._store.list_dates(station_id)

    def is_bookable(self, station_id: str, day: date, today: date | None = None) -> bool:
        self._require_station(station_id)
        return is_bookable(self._store, station_id, day, today)

    def calendar_month(
        self,
        station_id: str,
        year: int,
        month: int,
        today: date | None = None,
    ) -> list[CalendarDay | None]:
        self._require_station(station_id)
        return [
            CalendarDay(date=day, bookable=is_bookable(self._store, station_id, day, today)) if day else None
            for day in days_in_month(year, month)
        ]

    def publish_slots(
        self,
        user: CurrentUser,
        station_id: str,
        day: date,
        slots: Iterable[str],
    ) -> list[str]:
        """
        Replace the open times of a date. Times already held by an active booking
        are left out so republishing a stale list cannot reopen a booked slot.
        """
        require_owned_station(self._stations, user, station_id)
        labels = {normalize_time_label(slot) for slot in slots}
        key = date_key(day)
        held = {label for label in labels if self._bookings.find_active_for_slot(station_id, key, label)}
        if held:
            self._logger.warning(
                "Booked times skipped on publish",
                extra={"station_id": station_id, "date": key, "reason": ",".join(sorted(held))},
            )
        return self._store.publish_slots(station_id, day, labels - held)

    def add_slot(self, user: CurrentUser, station_id: str, day: date, time: str) -> list[str]:
        require_owned_station(self._stations, user, station_id)
        label = normalize_time_label(time)
        if self._bookings.find_active_for_slot(station_id, date_key(day), label) is None:
            self._store.release_slot(station_id, day, label)
        return self._store.list_slots(station_id, day)

    def remove_slot(self, user: CurrentUser, station_id: str, day: date, time: str) -> list[str]:
        require_owned_station(self._stations, user, station_id)
        self._store.withdraw_slot(station_id, day, normalize_time_label(time))
        return self._store.list_slots(station_id, day)

    def _require_station(self, station_id: str) -> None:
        if self._stations.get(station_id) is None:
            raise NotFound(f"Station {station_id} not found")
