from datetime import date

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_owner
from app.api.errors import to_http_error
from app.api.v1.schemas import (
    AddSlotRequestSchema,
    AvailabilitySchema,
    CalendarDaySchema,
    CalendarSchema,
    PublishSlotsRequestSchema,
    QuoteRequestSchema,
    QuoteResponseSchema,
    ReplaceServicesRequestSchema,
    SlotsSchema,
    StationSchema,
)
from app.application.exceptions import BookingEngineError
from app.application.use_cases.availability import AvailabilityUseCase
from app.application.use_cases.selection import aggregate
from app.application.use_cases.stations import StationUseCase
from app.domain.entities.current_user import CurrentUser
from app.wiring.dependencies import get_availability_use_case, get_station_use_case

router = APIRouter()


@router.get("/stations", response_model=list[StationSchema])
def list_stations(uc: StationUseCase = Depends(get_station_use_case)):
    return [StationSchema.from_domain(s) for s in uc.list_stations()]


@router.get("/owners/me/stations", response_model=list[StationSchema])
def list_my_stations(
    owner: CurrentUser = Depends(get_current_owner),
    uc: StationUseCase = Depends(get_station_use_case),
):
    return [StationSchema.from_domain(s) for s in uc.list_owner_stations(owner)]


@router.get("/stations/{station_id}", response_model=StationSchema)
def get_station(station_id: str, uc: StationUseCase = Depends(get_station_use_case)):
    try:
        return StationSchema.from_domain(uc.get_station(station_id))
    except BookingEngineError as e:
        raise to_http_error(e)


@router.put("/stations/{station_id}/services", response_model=StationSchema)
def replace_services(
    station_id: str,
    req: ReplaceServicesRequestSchema,
    owner: CurrentUser = Depends(get_current_owner),
    uc: StationUseCase = Depends(get_station_use_case),
):
    try:
        station = uc.replace_services(owner, station_id, [s.to_domain() for s in req.services])
    except BookingEngineError as e:
        raise to_http_error(e)
    return StationSchema.from_domain(station)


@router.post("/stations/{station_id}/quote", response_model=QuoteResponseSchema)
def quote(
    station_id: str,
    req: QuoteRequestSchema,
    uc: StationUseCase = Depends(get_station_use_case),
):
    try:
        station = uc.get_station(station_id)
    except BookingEngineError as e:
        raise to_http_error(e)
    return QuoteResponseSchema.from_domain(aggregate(station, req.service_ids))


@router.get("/stations/{station_id}/calendar", response_model=CalendarSchema)
def calendar(
    station_id: str,
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        days = uc.calendar_month(station_id, year, month)
    except BookingEngineError as e:
        raise to_http_error(e)
    return CalendarSchema(
        station_id=station_id,
        year=year,
        month=month,
        days=[CalendarDaySchema.from_domain(d) if d else None for d in days],
    )


@router.get("/stations/{station_id}/availability", response_model=AvailabilitySchema)
def list_availability(station_id: str, uc: AvailabilityUseCase = Depends(get_availability_use_case)):
    try:
        return AvailabilitySchema(station_id=station_id, dates=uc.list_dates(station_id))
    except BookingEngineError as e:
        raise to_http_error(e)


@router.get("/stations/{station_id}/availability/{day}", response_model=SlotsSchema)
def list_slots(station_id: str, day: date, uc: AvailabilityUseCase = Depends(get_availability_use_case)):
    try:
        return SlotsSchema(station_id=station_id, date=day, slots=uc.list_slots(station_id, day))
    except BookingEngineError as e:
        raise to_http_error(e)


@router.put("/stations/{station_id}/availability/{day}", response_model=SlotsSchema)
def publish_slots(
    station_id: str,
    day: date,
    req: PublishSlotsRequestSchema,
    owner: CurrentUser = Depends(get_current_owner),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.publish_slots(owner, station_id, day, req.slots)
    except BookingEngineError as e:
        raise to_http_error(e)
    return SlotsSchema(station_id=station_id, date=day, slots=slots)


@router.post("/stations/{station_id}/availability/{day}/slots", response_model=SlotsSchema)
def add_slot(
    station_id: str,
    day: date,
    req: AddSlotRequestSchema,
    owner: CurrentUser = Depends(get_current_owner),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.add_slot(owner, station_id, day, req.time)
    except BookingEngineError as e:
        raise to_http_error(e)
    return SlotsSchema(station_id=station_id, date=day, slots=slots)


@router.delete("/stations/{station_id}/availability/{day}/slots/{time}", response_model=SlotsSchema)
def remove_slot(
    station_id: str,
    day: date,
    time: str,
    owner: CurrentUser = Depends(get_current_owner),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.remove_slot(owner, station_id, day, time)
    except BookingEngineError as e:
        raise to_http_error(e)
    return SlotsSchema(station_id=station_id, date=day, slots=slots)
