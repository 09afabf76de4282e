from __future__ import annotations

import base64
import json
import logging
import threading
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

from app.application.exceptions import SlotUnavailable
from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.reservation_ledger import ReservationLedgerPort
from app.application.utils.calendar import date_key, is_valid_time_label, normalize_time_label
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.pending_reservation import PendingReservation
from app.domain.entities.service import Service
from app.infrastructure.store.memory_availability_store import KeyedLocks, normalize_slots

logger = logging.getLogger(__name__)


def _read_json(file_path: Path, default: Any) -> Any:
    if not file_path.exists():
        return default
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json_atomic(file_path: Path, data: Any) -> None:
    """Write to a temp file next to the target, then rename over it."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = file_path.with_suffix(file_path.suffix + ".tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path.replace(file_path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink(missing_ok=True)
        raise


def _safe_name(value: str) -> str:
    # Station ids become directory names; the encoding keeps distinct ids apart
    return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii")


class JsonAvailabilityStore(AvailabilityStorePort):
    """One JSON file per (station, date): {data_dir}/availability/{station}/{YYYY-MM-DD}.json"""

    def __init__(self, data_dir: str = "./data") -> None:
        self._root = Path(data_dir) / "availability"
        self._root.mkdir(parents=True, exist_ok=True)
        self._locks = KeyedLocks()

    def _file_path(self, station_id: str, key: str) -> Path:
        return self._root / _safe_name(station_id) / f"{key}.json"

    def _load(self, station_id: str, key: str) -> list[str]:
        file_path = self._file_path(station_id, key)
        try:
            data = _read_json(file_path, {"slots": []})
        except (json.JSONDecodeError, IOError):
            # Unreadable entry counts as "nothing open" rather than guessing
            logger.exception("Unreadable availability file", extra={"station_id": station_id, "date": key})
            return []
        return sorted({slot for slot in data.get("slots", []) if is_valid_time_label(slot)})

    def _save(self, station_id: str, key: str, slots: list[str]) -> None:
        file_path = self._file_path(station_id, key)
        if not slots:
            file_path.unlink(missing_ok=True)
            return
        _write_json_atomic(file_path, {"station_id": station_id, "date": key, "slots": slots, "version": 1})

    def list_slots(self, station_id: str, day: date) -> list[str]:
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            return self._load(station_id, key)

    def list_dates(self, station_id: str) -> dict[str, list[str]]:
        station_dir = self._root / _safe_name(station_id)
        result: dict[str, list[str]] = {}
        if not station_dir.exists():
            return result
        for file_path in sorted(station_dir.glob("*.json")):
            key = file_path.stem
            with self._locks.hold((station_id, key)):
                slots = self._load(station_id, key)
            if slots:
                result[key] = slots
        return result

    def publish_slots(self, station_id: str, day: date, slots: Iterable[str]) -> list[str]:
        normalized = normalize_slots(slots)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            self._save(station_id, key, normalized)
        logger.info("Slots published", extra={"station_id": station_id, "date": key})
        return list(normalized)

    def reserve_slot(self, station_id: str, day: date, time: str) -> None:
        label = normalize_time_label(time)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            current = self._load(station_id, key)
            if label not in current:
                raise SlotUnavailable(f"{label} on {key} is not open at station {station_id}")
            self._save(station_id, key, [slot for slot in current if slot != label])

    def release_slot(self, station_id: str, day: date, time: str) -> None:
        label = normalize_time_label(time)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            current = self._load(station_id, key)
            if label not in current:
                self._save(station_id, key, sorted([*current, label]))

    def withdraw_slot(self, station_id: str, day: date, time: str) -> bool:
        label = normalize_time_label(time)
        key = date_key(day)
        with self._locks.hold((station_id, key)):
            current = self._load(station_id, key)
            if label not in current:
                return False
            self._save(station_id, key, [slot for slot in current if slot != label])
            return True


def _serialize_service(service: Service) -> dict[str, Any]:
    return {
        "id": service.id,
        "name": service.name,
        "duration_minutes": service.duration_minutes,
        "price": str(service.price),
    }


def _deserialize_service(data: dict[str, Any]) -> Service:
    return Service(
        id=data["id"],
        name=data["name"],
        duration_minutes=int(data["duration_minutes"]),
        price=Decimal(data["price"]),
    )


def _serialize_booking(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.id,
        "customer_id": booking.customer_id,
        "station_id": booking.station_id,
        "station_name": booking.station_name,
        "date": booking.date,
        "time": booking.time,
        "services": [_serialize_service(s) for s in booking.services],
        "total_price": str(booking.total_price),
        "total_duration_minutes": booking.total_duration_minutes,
        "status": booking.status.value,
        "reward_issued": booking.reward_issued,
        "created_at": booking.created_at,
    }


def _deserialize_booking(data: dict[str, Any]) -> Booking:
    return Booking(
        id=data["id"],
        customer_id=data["customer_id"],
        station_id=data["station_id"],
        station_name=data["station_name"],
        date=data["date"],
        time=data["time"],
        services=tuple(_deserialize_service(s) for s in data.get("services", [])),
        total_price=Decimal(data["total_price"]),
        total_duration_minutes=int(data.get("total_duration_minutes", 0)),
        status=BookingStatus(data["status"]),
        reward_issued=bool(data.get("reward_issued", False)),
        created_at=float(data.get("created_at", 0.0)),
    )


class JsonBookingRepository(BookingRepositoryPort):
    """All bookings in {data_dir}/bookings.json, kept in insertion order."""

    def __init__(self, data_dir: str = "./data") -> None:
        self._file_path = Path(data_dir) / "bookings.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _load(self) -> list[Booking]:
        # A corrupt bookings file is not silently reset; history must not vanish.
        data = _read_json(self._file_path, {"bookings": []})
        return [_deserialize_booking(item) for item in data.get("bookings", [])]

    def _save(self, bookings: list[Booking]) -> None:
        _write_json_atomic(
            self._file_path,
            {"bookings": [_serialize_booking(b) for b in bookings], "version": 1},
        )

    def add(self, booking: Booking) -> None:
        with self._lock:
            bookings = self._load()
            if any(existing.id == booking.id for existing in bookings):
                raise ValueError(f"Booking {booking.id} already exists")
            bookings.append(booking)
            self._save(bookings)

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            for booking in self._load():
                if booking.id == booking_id:
                    return booking
        return None

    def list_for_customer(self, customer_id: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._load() if b.customer_id == customer_id]

    def list_for_station(self, station_id: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._load() if b.station_id == station_id]

    def find_active_for_slot(self, station_id: str, date: str, time: str) -> Booking | None:
        with self._lock:
            for booking in self._load():
                if (booking.station_id, booking.date, booking.time) == (station_id, date, time) and booking.is_active:
                    return booking
        return None

    def compare_and_set_status(
        self,
        booking_id: str,
        expected: BookingStatus,
        target: BookingStatus,
    ) -> Booking | None:
        with self._lock:
            bookings = self._load()
            for index, booking in enumerate(bookings):
                if booking.id != booking_id:
                    continue
                if booking.status != expected:
                    return None
                updated = booking.with_status(target)
                bookings[index] = updated
                self._save(bookings)
                return updated
        return None


class JsonReservationLedger(ReservationLedgerPort):
    def __init__(self, data_dir: str = "./data") -> None:
        self._file_path = Path(data_dir) / "pending_reservations.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, dict[str, Any]]:
        return _read_json(self._file_path, {"pending": {}}).get("pending", {})

    def _save(self, pending: dict[str, dict[str, Any]]) -> None:
        _write_json_atomic(self._file_path, {"pending": pending, "version": 1})

    def record(self, reservation: PendingReservation) -> None:
        with self._lock:
            pending = self._load()
            pending[reservation.token] = {
                "station_id": reservation.station_id,
                "date": reservation.date,
                "time": reservation.time,
                "customer_id": reservation.customer_id,
                "reserved_at": reservation.reserved_at,
            }
            self._save(pending)

    def discard(self, token: str) -> None:
        with self._lock:
            pending = self._load()
            if pending.pop(token, None) is not None:
                self._save(pending)

    def list_older_than(self, cutoff_ts: float) -> list[PendingReservation]:
        with self._lock:
            pending = self._load()
        return [
            PendingReservation(token=token, **row)
            for token, row in pending.items()
            if row["reserved_at"] <= cutoff_ts
        ]
