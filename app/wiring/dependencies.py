from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.draft_store import DraftStorePort
from app.application.ports.reservation_ledger import ReservationLedgerPort
from app.application.ports.reward_policy import RewardPolicyPort
from app.application.ports.station_repository import StationRepositoryPort
from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.booking import BookingLifecycleUseCase
from app.application.use_cases.stations import StationUseCase
from app.core.config import Settings, settings
from app.infrastructure.catalog.demo_stations import seed_demo_data
from app.infrastructure.rewards.reward_policy import FixedRewardPolicy, RandomRewardPolicy
from app.infrastructure.store.json_store import JsonAvailabilityStore, JsonBookingRepository, JsonReservationLedger
from app.infrastructure.store.memory_availability_store import MemoryAvailabilityStore
from app.infrastructure.store.memory_store import (
    MemoryBookingRepository,
    MemoryDraftStore,
    MemoryReservationLedger,
    MemoryStationRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    config: Settings
    stations: StationRepositoryPort
    availability: AvailabilityStorePort
    bookings: BookingRepositoryPort
    drafts: DraftStorePort
    ledger: ReservationLedgerPort
    reward_policy: RewardPolicyPort


_container: Container | None = None


def get_reward_policy(config: Settings) -> RewardPolicyPort:
    name = config.REWARD_POLICY.lower().strip()
    if name == "always":
        return FixedRewardPolicy(True)
    if name == "never":
        return FixedRewardPolicy(False)
    if name != "random":
        raise ValueError(f"Unknown REWARD_POLICY: {config.REWARD_POLICY}")
    return RandomRewardPolicy(probability=config.REWARD_PROBABILITY)


def build_container(config: Settings) -> Container:
    provider = config.STORE_PROVIDER.lower().strip()
    if provider == "json":
        availability: AvailabilityStorePort = JsonAvailabilityStore(config.DATA_DIR)
        bookings: BookingRepositoryPort = JsonBookingRepository(config.DATA_DIR)
        ledger: ReservationLedgerPort = JsonReservationLedger(config.DATA_DIR)
    elif provider == "memory":
        availability = MemoryAvailabilityStore()
        bookings = MemoryBookingRepository()
        ledger = MemoryReservationLedger()
    else:
        raise ValueError(f"Unknown STORE_PROVIDER: {config.STORE_PROVIDER}")

    container = Container(
        config=config,
        stations=MemoryStationRepository(),
        availability=availability,
        bookings=bookings,
        drafts=MemoryDraftStore(),
        ledger=ledger,
        reward_policy=get_reward_policy(config),
    )
    if config.SEED_DEMO_DATA:
        seed_demo_data(container.stations, container.availability)
    logger.info("Container built", extra={"reason": f"store={provider} env={config.ENV}"})
    return container


def get_container() -> Container:
    global _container
    if _container is None:
        _container = build_container(settings)
    return _container


def set_container(container: Container | None) -> None:
    global _container
    _container = container


def get_station_use_case() -> StationUseCase:
    return StationUseCase(stations=get_container().stations)


def get_availability_use_case() -> AvailabilityUseCase:
    container = get_container()
    return AvailabilityUseCase(
        stations=container.stations,
        store=container.availability,
        bookings=container.bookings,
    )


def get_booking_use_case() -> BookingLifecycleUseCase:
    container = get_container()
    return BookingLifecycleUseCase(
        stations=container.stations,
        availability=container.availability,
        bookings=container.bookings,
        drafts=container.drafts,
        ledger=container.ledger,
        reward_policy=container.reward_policy,
        draft_ttl_seconds=container.config.DRAFT_TTL_SECONDS,
        recovery_timeout_seconds=container.config.RESERVATION_RECOVERY_TIMEOUT_SECONDS,
    )
