from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date


class AvailabilityStorePort(ABC):
    """
    Open time slots per (station, date).

    Every mutating call on the same (station_id, day) key must be serialized;
    different keys are independent.
    """

    @abstractmethod
    def list_slots(self, station_id: str, day: date) -> list[str]:
        """Sorted open time labels for the date. Empty if none published."""
        raise NotImplementedError

    @abstractmethod
    def list_dates(self, station_id: str) -> dict[str, list[str]]:
        """All dates with at least one open slot, keyed by YYYY-MM-DD."""
        raise NotImplementedError

    @abstractmethod
    def publish_slots(self, station_id: str, day: date, slots: Iterable[str]) -> list[str]:
        """
        Replace the slot list for the date with `slots`, de-duplicated and sorted.
        Raises ValidationError (and changes nothing) if any label is not HH:MM.
        """
        raise NotImplementedError

    @abstractmethod
    def reserve_slot(self, station_id: str, day: date, time: str) -> None:
        """
        Atomically remove `time` from the open list.
        Raises SlotUnavailable and changes nothing if it is not listed,
        ValidationError if `time` is not HH:MM.
        """
        raise NotImplementedError

    @abstractmethod
    def release_slot(self, station_id: str, day: date, time: str) -> None:
        """Put `time` back into the open list. No-op if already present."""
        raise NotImplementedError

    @abstractmethod
    def withdraw_slot(self, station_id: str, day: date, time: str) -> bool:
        """Remove `time` if listed. Returns False when it was not open. Raises ValidationError on a bad label."""
        raise NotImplementedError
