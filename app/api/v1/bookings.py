import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import get_current_customer, get_current_owner
from app.api.errors import to_http_error
from app.api.v1.schemas import (
    BookingSchema,
    ConfirmBookingRequestSchema,
    CustomerSummarySchema,
    DraftSchema,
    StageDraftRequestSchema,
    StationSummarySchema,
    SweepResponseSchema,
)
from app.application.exceptions import BookingEngineError
from app.application.use_cases.booking import BookingLifecycleUseCase
from app.domain.entities.current_user import CurrentUser
from app.wiring.dependencies import get_booking_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.put("/drafts/me", response_model=DraftSchema)
def stage_draft(
    req: StageDraftRequestSchema,
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    try:
        draft = uc.stage_draft(
            customer_id=customer.id,
            station_id=req.station_id,
            day=req.date,
            time=req.time,
            service_ids=req.service_ids,
        )
    except BookingEngineError as e:
        raise to_http_error(e)
    return DraftSchema.from_domain(draft)


@router.get("/drafts/me", response_model=DraftSchema)
def get_draft(
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    draft = uc.get_draft(customer.id)
    if draft is None:
        raise HTTPException(status_code=404, detail="No staged selection")
    return DraftSchema.from_domain(draft)


@router.delete("/drafts/me", status_code=204)
def discard_draft(
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
) -> Response:
    uc.discard_draft(customer.id)
    return Response(status_code=204)


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def confirm_booking(
    req: ConfirmBookingRequestSchema,
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    if not req.payment_succeeded:
        raise HTTPException(status_code=402, detail="Payment has not been authorized")
    try:
        booking = uc.confirm_current_draft(customer.id)
    except BookingEngineError as e:
        raise to_http_error(e)
    return BookingSchema.from_domain(booking)


@router.get("/bookings", response_model=list[BookingSchema])
def list_bookings(
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    return [BookingSchema.from_domain(b) for b in uc.list_bookings(customer.id)]


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    try:
        return BookingSchema.from_domain(uc.get_booking(booking_id, customer.id))
    except BookingEngineError as e:
        raise to_http_error(e)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: str,
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    try:
        booking = uc.cancel_booking(booking_id, customer.id)
    except BookingEngineError as e:
        raise to_http_error(e)
    return BookingSchema.from_domain(booking)


@router.post("/bookings/{booking_id}/complete", response_model=BookingSchema)
def complete_booking(
    booking_id: str,
    owner: CurrentUser = Depends(get_current_owner),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    try:
        booking = uc.complete_booking(booking_id, owner.id)
    except BookingEngineError as e:
        raise to_http_error(e)
    return BookingSchema.from_domain(booking)


@router.get("/stations/{station_id}/bookings", response_model=list[BookingSchema])
def list_station_bookings(
    station_id: str,
    owner: CurrentUser = Depends(get_current_owner),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    try:
        bookings = uc.list_station_bookings(station_id, owner.id)
    except BookingEngineError as e:
        raise to_http_error(e)
    return [BookingSchema.from_domain(b) for b in bookings]


@router.get("/customers/me/summary", response_model=CustomerSummarySchema)
def customer_summary(
    customer: CurrentUser = Depends(get_current_customer),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    return CustomerSummarySchema.from_domain(uc.customer_summary(customer.id))


@router.get("/stations/{station_id}/summary", response_model=StationSummarySchema)
def station_summary(
    station_id: str,
    owner: CurrentUser = Depends(get_current_owner),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    try:
        summary = uc.station_summary(station_id, owner.id)
    except BookingEngineError as e:
        raise to_http_error(e)
    return StationSummarySchema.from_domain(summary)


@router.post("/admin/reservations/sweep", response_model=SweepResponseSchema)
def sweep_reservations(
    owner: CurrentUser = Depends(get_current_owner),
    uc: BookingLifecycleUseCase = Depends(get_booking_use_case),
):
    released = uc.sweep_orphaned_reservations()
    logger.info("Reservation sweep finished", extra={"reason": f"released={released}"})
    return SweepResponseSchema(released=released)
