from __future__ import annotations

from app.application.exceptions import Forbidden, NotFound
from app.application.ports.station_repository import StationRepositoryPort
from app.domain.entities.current_user import CurrentUser
from app.domain.entities.station import Station


def require_owned_station(stations: StationRepositoryPort, user: CurrentUser, station_id: str) -> Station:
    """Load a station the current user may manage. Raises NotFound / Forbidden."""
    station = stations.get(station_id)
    if station is None:
        raise NotFound(f"Station {station_id} not found")
    if not user.is_owner or station.owner_id != user.id:
        raise Forbidden(f"User {user.id} does not manage station {station_id}")
    return station
