from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.application.use_cases.availability import CalendarDay
from app.application.use_cases.selection import SelectionTotals
from app.application.use_cases.summaries import CustomerSummary, StationSummary
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.draft_selection import DraftSelection
from app.domain.entities.service import Service
from app.domain.entities.station import Station

TIME_LABEL_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ServiceSchema(BaseModel):
    id: str = Field(min_length=1)
    name: str
    duration_minutes: int = Field(gt=0)
    price: Decimal = Field(ge=0)

    @classmethod
    def from_domain(cls, service: Service) -> "ServiceSchema":
        return cls(
            id=service.id,
            name=service.name,
            duration_minutes=service.duration_minutes,
            price=service.price,
        )

    def to_domain(self) -> Service:
        return Service(id=self.id, name=self.name, duration_minutes=self.duration_minutes, price=self.price)


class StationSchema(BaseModel):
    id: str
    name: str
    address: str
    rating: float
    owner_id: str
    services: list[ServiceSchema]

    @classmethod
    def from_domain(cls, station: Station) -> "StationSchema":
        return cls(
            id=station.id,
            name=station.name,
            address=station.address,
            rating=station.rating,
            owner_id=station.owner_id,
            services=[ServiceSchema.from_domain(s) for s in station.services],
        )


class SlotsSchema(BaseModel):
    station_id: str
    date: dt.date
    slots: list[str]


class AvailabilitySchema(BaseModel):
    station_id: str
    dates: dict[str, list[str]]


class PublishSlotsRequestSchema(BaseModel):
    slots: list[str] = Field(default_factory=list)


class AddSlotRequestSchema(BaseModel):
    time: str = Field(pattern=TIME_LABEL_PATTERN)


class ReplaceServicesRequestSchema(BaseModel):
    services: list[ServiceSchema]


class CalendarDaySchema(BaseModel):
    date: dt.date
    bookable: bool

    @classmethod
    def from_domain(cls, day: CalendarDay) -> "CalendarDaySchema":
        return cls(date=day.date, bookable=day.bookable)


class CalendarSchema(BaseModel):
    station_id: str
    year: int
    month: int
    days: list[CalendarDaySchema | None]


class QuoteRequestSchema(BaseModel):
    service_ids: list[str] = Field(default_factory=list)


class QuoteResponseSchema(BaseModel):
    total_price: Decimal
    total_duration_minutes: int

    @classmethod
    def from_domain(cls, totals: SelectionTotals) -> "QuoteResponseSchema":
        return cls(total_price=totals.total_price, total_duration_minutes=totals.total_duration_minutes)


class StageDraftRequestSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    station_id: str = Field(min_length=1)
    date: dt.date
    time: str = Field(pattern=TIME_LABEL_PATTERN)
    service_ids: list[str] = Field(min_length=1)


class DraftSchema(BaseModel):
    station_id: str
    station_name: str
    date: str
    time: str
    services: list[ServiceSchema]
    total_price: Decimal
    total_duration_minutes: int
    staged_at: float

    @classmethod
    def from_domain(cls, draft: DraftSelection) -> "DraftSchema":
        return cls(
            station_id=draft.station_id,
            station_name=draft.station_name,
            date=draft.date,
            time=draft.time,
            services=[ServiceSchema.from_domain(s) for s in draft.services],
            total_price=draft.total_price,
            total_duration_minutes=draft.total_duration_minutes,
            staged_at=draft.staged_at,
        )


class ConfirmBookingRequestSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_succeeded: bool
    payment_reference: str | None = None


class BookingSchema(BaseModel):
    id: str
    station_id: str
    station_name: str
    date: str
    time: str
    services: list[ServiceSchema]
    total_price: Decimal
    total_duration_minutes: int
    status: BookingStatus
    reward_issued: bool
    created_at: float

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingSchema":
        return cls(
            id=booking.id,
            station_id=booking.station_id,
            station_name=booking.station_name,
            date=booking.date,
            time=booking.time,
            services=[ServiceSchema.from_domain(s) for s in booking.services],
            total_price=booking.total_price,
            total_duration_minutes=booking.total_duration_minutes,
            status=booking.status,
            reward_issued=booking.reward_issued,
            created_at=booking.created_at,
        )


class SweepResponseSchema(BaseModel):
    released: int


class CustomerSummarySchema(BaseModel):
    total_bookings: int
    completed_bookings: int
    rewards_collected: int

    @classmethod
    def from_domain(cls, summary: CustomerSummary) -> "CustomerSummarySchema":
        return cls(
            total_bookings=summary.total_bookings,
            completed_bookings=summary.completed_bookings,
            rewards_collected=summary.rewards_collected,
        )


class StationSummarySchema(BaseModel):
    station_id: str
    total_bookings: int
    completed_bookings: int
    revenue: Decimal

    @classmethod
    def from_domain(cls, summary: StationSummary) -> "StationSummarySchema":
        return cls(
            station_id=summary.station_id,
            total_bookings=summary.total_bookings,
            completed_bookings=summary.completed_bookings,
            revenue=summary.revenue,
        )
