from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.service import Service


@dataclass(frozen=True)
class DraftSelection:
    """A customer's staged, not yet paid choice of station, slot and services."""

    customer_id: str
    station_id: str
    station_name: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    services: tuple[Service, ...]
    total_price: Decimal
    total_duration_minutes: int
    staged_at: float

    def is_expired(self, now_ts: float, ttl_seconds: float) -> bool:
        if ttl_seconds <= 0:
            return False
        return now_ts - self.staged_at >= ttl_seconds
