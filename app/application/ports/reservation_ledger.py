from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.pending_reservation import PendingReservation


class ReservationLedgerPort(ABC):
    """Slots reserved for confirmations that have not been persisted yet."""

    @abstractmethod
    def record(self, reservation: PendingReservation) -> None:
        raise NotImplementedError

    @abstractmethod
    def discard(self, token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_older_than(self, cutoff_ts: float) -> list[PendingReservation]:
        raise NotImplementedError
