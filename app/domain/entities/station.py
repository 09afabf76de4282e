from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.service import Service


@dataclass(frozen=True)
class Station:
    id: str
    name: str
    address: str
    owner_id: str
    rating: float = 0.0
    services: tuple[Service, ...] = ()

    def get_service(self, service_id: str) -> Service | None:
        for service in self.services:
            if service.id == service_id:
                return service
        return None
