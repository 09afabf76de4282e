from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date

from app.application.exceptions import SlotUnavailable
from app.application.ports.availability_store import AvailabilityStorePort
from app.application.utils.calendar import date_key, normalize_time_label


class KeyedLocks:
    """
    Lock per key, kept only while some thread holds or waits for it.

    The guard lock is held only to look an entry up and to count its users, so
    the map never grows past the number of keys in use at the same moment.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], list] = {}  # key -> [lock, users]
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, key: tuple[str, str]) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]


def normalize_slots(slots: Iterable[str]) -> list[str]:
    """Validate every label, then de-duplicate and sort. Raises ValidationError."""
    return sorted({normalize_time_label(slot) for slot in slots})


class MemoryAvailabilityStore(AvailabilityStorePort):
    def __init__(self) -> None:
        self._slots: dict[str, dict[str, list[str]]] = {}
        self._locks = KeyedLocks()
        self._logger = logging.getLogger(__name__)

    def list_slots(self, station_id: str, day: date) -> list[str]:
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            return list(self._slots.get(station_id, {}).get(key, []))

    def list_dates(self, station_id: str) -> dict[str, list[str]]:
        dates = dict(self._slots.get(station_id, {}))
        result: dict[str, list[str]] = {}
        for key in sorted(dates):
            with self._locks.hold((station_id, key)):
                slots = list(self._slots.get(station_id, {}).get(key, []))
            if slots:
                result[key] = slots
        return result

    def publish_slots(self, station_id: str, day: date, slots: Iterable[str]) -> list[str]:
        normalized = normalize_slots(slots)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            self._write(station_id, key, normalized)
        self._logger.info(
            "Slots published",
            extra={"station_id": station_id, "date": key, "slot_count": len(normalized)},
        )
        return list(normalized)

    def reserve_slot(self, station_id: str, day: date, time: str) -> None:
        label = normalize_time_label(time)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            current = self._slots.get(station_id, {}).get(key, [])
            if label not in current:
                raise SlotUnavailable(f"{label} on {key} is not open at station {station_id}")
            self._write(station_id, key, [slot for slot in current if slot != label])

    def release_slot(self, station_id: str, day: date, time: str) -> None:
        label = normalize_time_label(time)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            current = self._slots.get(station_id, {}).get(key, [])
            if label in current:
                return
            self._write(station_id, key, sorted([*current, label]))

    def withdraw_slot(self, station_id: str, day: date, time: str) -> bool:
        label = normalize_time_label(time)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            current = self._slots.get(station_id, {}).get(key, [])
            if label not in current:
                return False
            self._write(station_id, key, [slot for slot in current if slot != label])
            return True

    def _write(self, station_id: str, key: str, slots: list[str]) -> None:
        # Caller holds the key lock. Empty lists are dropped: absent == empty.
        station_slots = self._slots.setdefault(station_id, {})
        if slots:
            station_slots[key] = slots
        else:
            station_slots.pop(key, None)
