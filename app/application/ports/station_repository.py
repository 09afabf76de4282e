from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.service import Service
from app.domain.entities.station import Station


class StationRepositoryPort(ABC):
    @abstractmethod
    def get(self, station_id: str) -> Station | None:
        """Get station by id."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Station]:
        raise NotImplementedError

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[Station]:
        raise NotImplementedError

    @abstractmethod
    def save(self, station: Station) -> None:
        """Insert or replace a station record."""
        raise NotImplementedError

    @abstractmethod
    def replace_services(self, station_id: str, services: tuple[Service, ...]) -> Station | None:
        """Swap the station's service catalog. Returns the updated station or None if unknown."""
        raise NotImplementedError
