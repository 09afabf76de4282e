from __future__ import annotations

import logging

from fastapi import HTTPException

from app.application.exceptions import (
    BookingConflict,
    BookingEngineError,
    Forbidden,
    InvalidSelection,
    InvalidTransition,
    NotFound,
    SlotUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: tuple[tuple[type[BookingEngineError], int], ...] = (
    (ValidationError, 422),
    (InvalidSelection, 400),
    (BookingConflict, 409),
    (SlotUnavailable, 409),
    (InvalidTransition, 409),
    (NotFound, 404),
    (Forbidden, 403),
)


def to_http_error(exc: BookingEngineError) -> HTTPException:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    logger.error("Unmapped booking error", extra={"reason": type(exc).__name__})
    return HTTPException(status_code=500, detail="Internal error")
