from __future__ import annotations

import logging
import time as _time
import uuid
from collections.abc import Callable, Iterable
from datetime import date

from app.application.exceptions import (
    BookingConflict,
    Forbidden,
    InvalidSelection,
    InvalidTransition,
    NotCancellable,
    NotFound,
    SlotUnavailable,
    ValidationError,
)
from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.draft_store import DraftStorePort
from app.application.ports.reservation_ledger import ReservationLedgerPort
from app.application.ports.reward_policy import RewardPolicyPort
from app.application.ports.station_repository import StationRepositoryPort
from app.application.use_cases.selection import aggregate, resolve_services
from app.application.use_cases.summaries import (
    CustomerSummary,
    StationSummary,
    summarize_customer,
    summarize_station,
)
from app.application.utils.calendar import date_key, normalize_time_label, parse_date_key
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.draft_selection import DraftSelection
from app.domain.entities.pending_reservation import PendingReservation
from app.domain.entities.station import Station


def _new_id() -> str:
    return uuid.uuid4().hex


class BookingLifecycleUseCase:
    """
    Turns staged selections into confirmed bookings and drives their status afterwards.

    Confirmation consumes the slot from the availability store before the booking is
    written; any failure after that point puts the slot back. A ledger row written
    before the reservation lets `sweep_orphaned_reservations` recover slots if the
    process dies in between. Cancellation writes the same kind of row before the
    status flips, so a slot that could not be released is recovered the same way.
    """

    def __init__(
        self,
        stations: StationRepositoryPort,
        availability: AvailabilityStorePort,
        bookings: BookingRepositoryPort,
        drafts: DraftStorePort,
        ledger: ReservationLedgerPort,
        reward_policy: RewardPolicyPort,
        draft_ttl_seconds: float = 900,
        recovery_timeout_seconds: float = 300,
        clock: Callable[[], float] = _time.time,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._stations = stations
        self._availability = availability
        self._bookings = bookings
        self._drafts = drafts
        self._ledger = ledger
        self._reward_policy = reward_policy
        self._draft_ttl_seconds = draft_ttl_seconds
        self._recovery_timeout_seconds = recovery_timeout_seconds
        self._clock = clock
        self._id_factory = id_factory
        self._logger = logging.getLogger(__name__)

    # Drafts

    def stage_draft(
        self,
        customer_id: str,
        station_id: str,
        day: date | str,
        time: str,
        service_ids: Iterable[str],
        today: date | None = None,
    ) -> DraftSelection:
        station = self._get_station(station_id)
        if isinstance(day, str):
            day = parse_date_key(day)
        label = normalize_time_label(time)

        requested = list(service_ids)
        if not requested:
            raise ValidationError("Select at least one service")

        unknown = sorted({service_id for service_id in requested if station.get_service(service_id) is None})
        if unknown:
            raise InvalidSelection(f"Unknown services for station {station_id}: {', '.join(unknown)}")

        if day < (today or date.today()):
            raise InvalidSelection(f"{date_key(day)} is in the past")

        # Re-check against the live listing; what the customer saw may be stale.
        if label not in self._availability.list_slots(station_id, day):
            raise InvalidSelection(f"{label} on {date_key(day)} is no longer available")

        totals = aggregate(station, requested)
        draft = DraftSelection(
            customer_id=customer_id,
            station_id=station.id,
            station_name=station.name,
            date=date_key(day),
            time=label,
            services=resolve_services(station, requested),
            total_price=totals.total_price,
            total_duration_minutes=totals.total_duration_minutes,
            staged_at=self._clock(),
        )
        self._drafts.put(draft)
        self._logger.info(
            "Draft staged",
            extra={"customer_id": customer_id, "station_id": station_id, "date": draft.date, "time": label},
        )
        return draft

    def get_draft(self, customer_id: str) -> DraftSelection | None:
        draft = self._drafts.get(customer_id)
        if draft is None:
            return None
        if draft.is_expired(self._clock(), self._draft_ttl_seconds):
            self._drafts.clear(customer_id)
            self._logger.info("Expired draft discarded", extra={"customer_id": customer_id})
            return None
        return draft

    def discard_draft(self, customer_id: str) -> None:
        self._drafts.clear(customer_id)

    # Confirmation

    def confirm_current_draft(self, customer_id: str) -> Booking:
        draft = self.get_draft(customer_id)
        if draft is None:
            raise InvalidSelection("No staged selection to confirm")
        return self.confirm_booking(draft, customer_id)

    def confirm_booking(self, draft: DraftSelection, customer_id: str) -> Booking:
        """
        Reserve the draft's slot and persist a confirmed booking.

        The caller must have obtained a successful payment authorization first.
        Raises BookingConflict if the slot was taken in the meantime.
        """
        if draft.customer_id != customer_id:
            raise Forbidden("Draft belongs to another customer")
        if draft.is_expired(self._clock(), self._draft_ttl_seconds):
            self._drafts.clear(customer_id)
            raise InvalidSelection("Selection expired, please choose a slot again")

        day = parse_date_key(draft.date)
        token = self._id_factory()
        self._ledger.record(
            PendingReservation(
                token=token,
                station_id=draft.station_id,
                date=draft.date,
                time=draft.time,
                customer_id=customer_id,
                reserved_at=self._clock(),
            )
        )

        try:
            self._availability.reserve_slot(draft.station_id, day, draft.time)
        except SlotUnavailable as e:
            self._ledger.discard(token)
            self._logger.warning(
                "Booking conflict",
                extra={
                    "customer_id": customer_id,
                    "station_id": draft.station_id,
                    "date": draft.date,
                    "time": draft.time,
                },
            )
            raise BookingConflict(f"{draft.time} on {draft.date} was just taken") from e

        try:
            booking = Booking(
                id=self._id_factory(),
                customer_id=customer_id,
                station_id=draft.station_id,
                station_name=draft.station_name,
                date=draft.date,
                time=draft.time,
                services=tuple(draft.services),
                total_price=draft.total_price,
                total_duration_minutes=draft.total_duration_minutes,
                status=BookingStatus.confirmed,
                reward_issued=bool(self._reward_policy.should_issue_reward(draft)),
                created_at=self._clock(),
            )
            self._bookings.add(booking)
        except Exception:
            self._compensate(token, draft)
            raise

        self._ledger.discard(token)
        self._drafts.clear(customer_id)
        self._logger.info(
            "Booking confirmed",
            extra={
                "booking_id": booking.id,
                "customer_id": customer_id,
                "station_id": booking.station_id,
                "date": booking.date,
                "time": booking.time,
            },
        )
        return booking

    def _compensate(self, token: str, draft: DraftSelection) -> None:
        extra = {"station_id": draft.station_id, "date": draft.date, "time": draft.time}
        try:
            self._availability.release_slot(draft.station_id, parse_date_key(draft.date), draft.time)
        except Exception:
            # Ledger row stays, the recovery sweep releases the slot later.
            self._logger.exception("Compensating slot release failed", extra=extra)
            return
        self._ledger.discard(token)
        self._logger.warning("Slot released after failed confirmation", extra=extra)

    # Status changes

    def cancel_booking(self, booking_id: str, customer_id: str) -> Booking:
        booking = self._get_booking(booking_id)
        if booking.customer_id != customer_id:
            raise Forbidden("Booking belongs to another customer")
        if booking.status != BookingStatus.confirmed:
            raise NotCancellable(f"Booking {booking_id} is {booking.status.value}")

        # Recorded before the status flips so a failed release is picked up by the sweep.
        token = self._id_factory()
        self._ledger.record(
            PendingReservation(
                token=token,
                station_id=booking.station_id,
                date=booking.date,
                time=booking.time,
                customer_id=customer_id,
                reserved_at=self._clock(),
            )
        )
        updated = self._bookings.compare_and_set_status(
            booking_id, BookingStatus.confirmed, BookingStatus.cancelled
        )
        if updated is None:
            # Lost a race with another cancel or a completion.
            self._ledger.discard(token)
            raise NotCancellable(f"Booking {booking_id} is no longer confirmed")

        try:
            self._availability.release_slot(updated.station_id, parse_date_key(updated.date), updated.time)
        except Exception:
            self._logger.exception(
                "Slot release after cancellation failed",
                extra={"booking_id": booking_id, "station_id": updated.station_id},
            )
            raise
        self._ledger.discard(token)
        self._logger.info(
            "Booking cancelled",
            extra={"booking_id": booking_id, "customer_id": customer_id, "station_id": updated.station_id},
        )
        return updated

    def complete_booking(self, booking_id: str, owner_id: str) -> Booking:
        booking = self._get_booking(booking_id)
        station = self._stations.get(booking.station_id)
        if station is None or station.owner_id != owner_id:
            raise Forbidden("Only the station owner can complete a booking")
        if not booking.status.can_transition_to(BookingStatus.completed):
            raise InvalidTransition(f"Booking {booking_id} is {booking.status.value}")

        updated = self._bookings.compare_and_set_status(
            booking_id, booking.status, BookingStatus.completed
        )
        if updated is None:
            raise InvalidTransition(f"Booking {booking_id} changed status concurrently")
        self._logger.info("Booking completed", extra={"booking_id": booking_id, "station_id": station.id})
        return updated

    # Queries

    def get_booking(self, booking_id: str, customer_id: str) -> Booking:
        booking = self._get_booking(booking_id)
        if booking.customer_id != customer_id:
            raise Forbidden("Booking belongs to another customer")
        return booking

    def list_bookings(self, customer_id: str) -> list[Booking]:
        return self._bookings.list_for_customer(customer_id)

    def list_station_bookings(self, station_id: str, owner_id: str) -> list[Booking]:
        station = self._get_station(station_id)
        if station.owner_id != owner_id:
            raise Forbidden("Only the station owner can list its bookings")
        return self._bookings.list_for_station(station_id)

    def customer_summary(self, customer_id: str) -> CustomerSummary:
        return summarize_customer(self._bookings.list_for_customer(customer_id))

    def station_summary(self, station_id: str, owner_id: str) -> StationSummary:
        return summarize_station(station_id, self.list_station_bookings(station_id, owner_id))

    # Recovery

    def sweep_orphaned_reservations(self, now_ts: float | None = None) -> int:
        """
        Release slots reserved by confirmations that never produced a booking.
        Returns the number of slots put back.
        """
        now = self._clock() if now_ts is None else now_ts
        released = 0
        for reservation in self._ledger.list_older_than(now - self._recovery_timeout_seconds):
            existing = self._bookings.find_active_for_slot(
                reservation.station_id, reservation.date, reservation.time
            )
            if existing is None:
                self._availability.release_slot(
                    reservation.station_id, parse_date_key(reservation.date), reservation.time
                )
                released += 1
                self._logger.warning(
                    "Orphaned reservation released",
                    extra={
                        "station_id": reservation.station_id,
                        "date": reservation.date,
                        "time": reservation.time,
                        "customer_id": reservation.customer_id,
                    },
                )
            self._ledger.discard(reservation.token)
        return released

    def _get_station(self, station_id: str) -> Station:
        station = self._stations.get(station_id)
        if station is None:
            raise NotFound(f"Station {station_id} not found")
        return station

    def _get_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found")
        return booking
