from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PendingReservation:
    token: str
    station_id: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    customer_id: str
    reserved_at: float
