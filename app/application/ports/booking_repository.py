from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking import Booking, BookingStatus


class BookingRepositoryPort(ABC):
    @abstractmethod
    def add(self, booking: Booking) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_for_customer(self, customer_id: str) -> list[Booking]:
        """Bookings of the customer in insertion order."""
        raise NotImplementedError

    @abstractmethod
    def list_for_station(self, station_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_active_for_slot(self, station_id: str, date: str, time: str) -> Booking | None:
        """The pending/confirmed booking holding (station, date, time), if any."""
        raise NotImplementedError

    @abstractmethod
    def compare_and_set_status(
        self,
        booking_id: str,
        expected: BookingStatus,
        target: BookingStatus,
    ) -> Booking | None:
        """
        Atomically move a booking from `expected` to `target`.
        Returns the updated booking, or None if it is unknown or no longer in `expected`.
        """
        raise NotImplementedError
