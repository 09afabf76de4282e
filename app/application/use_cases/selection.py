from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.service import Service
from app.domain.entities.station import Station


@dataclass(frozen=True)
class SelectionTotals:
    """Price and duration of a set of chosen services."""

    total_price: Decimal
    total_duration_minutes: int


def resolve_services(station: Station, service_ids: Iterable[str]) -> tuple[Service, ...]:
    """
    Catalog entries whose id is in `service_ids`, in catalog order.
    Unknown ids are skipped; duplicates in the input count once.
    """
    wanted = set(service_ids)
    return tuple(service for service in station.services if service.id in wanted)


def aggregate(station: Station, service_ids: Iterable[str]) -> SelectionTotals:
    """
    Sum price and duration over the station's services matching `service_ids`.

    Unknown ids are ignored rather than rejected: the catalog may change between
    the moment a customer picks services and the moment totals are shown.
    """
    services = resolve_services(station, service_ids)
    return SelectionTotals(
        total_price=sum((service.price for service in services), Decimal("0")),
        total_duration_minutes=sum(service.duration_minutes for service in services),
    )
