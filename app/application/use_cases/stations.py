from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from app.application.exceptions import NotFound, ValidationError
from app.application.ports.station_repository import StationRepositoryPort
from app.application.utils.authorization import require_owned_station
from app.domain.entities.current_user import CurrentUser
from app.domain.entities.service import Service
from app.domain.entities.station import Station


class StationUseCase:
    def __init__(self, stations: StationRepositoryPort) -> None:
        self._stations = stations
        self._logger = logging.getLogger(__name__)

    def list_stations(self) -> list[Station]:
        return self._stations.list_all()

    def get_station(self, station_id: str) -> Station:
        station = self._stations.get(station_id)
        if station is None:
            raise NotFound(f"Station {station_id} not found")
        return station

    def list_owner_stations(self, user: CurrentUser) -> list[Station]:
        if not user.is_owner:
            return []
        return self._stations.list_by_owner(user.id)

    def replace_services(self, user: CurrentUser, station_id: str, services: Iterable[Service]) -> Station:
        """
        Publish a new service catalog. Bookings already confirmed keep their own
        snapshot of services and prices.
        """
        require_owned_station(self._stations, user, station_id)
        catalog = validate_catalog(services)
        updated = self._stations.replace_services(station_id, catalog)
        if updated is None:
            raise NotFound(f"Station {station_id} not found")
        self._logger.info(
            "Service catalog replaced",
            extra={"station_id": station_id, "service_count": len(catalog)},
        )
        return updated


def validate_catalog(services: Iterable[Service]) -> tuple[Service, ...]:
    catalog = tuple(services)
    seen: set[str] = set()
    for service in catalog:
        if not service.id or service.id in seen:
            raise ValidationError(f"Duplicate or empty service id: {service.id!r}")
        seen.add(service.id)
        if service.duration_minutes <= 0:
            raise ValidationError(f"Service {service.id} must last at least one minute")
        if Decimal(service.price) < 0:
            raise ValidationError(f"Service {service.id} has a negative price")
    return catalog
