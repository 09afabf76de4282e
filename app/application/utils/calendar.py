from __future__ import annotations

import calendar as _stdlib_calendar
import re
from datetime import date, datetime

from app.application.exceptions import ValidationError
from app.application.ports.availability_store import AvailabilityStorePort

TIME_LABEL_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

WEEK_LENGTH = 7


def date_key(day: date) -> str:
    """Canonical storage/comparison key for a date (YYYY-MM-DD)."""
    return day.isoformat()


def parse_date_key(text: str) -> date:
    try:
        return date.fromisoformat((text or "").strip())
    except ValueError:
        raise ValidationError(f"Invalid date: {text!r}, expected YYYY-MM-DD")


def is_valid_time_label(text: str) -> bool:
    return bool(TIME_LABEL_RE.match(text or ""))


def normalize_time_label(text: str) -> str:
    """Strip and validate an HH:MM (24h) label. Raises ValidationError."""
    label = (text or "").strip() if isinstance(text, str) else ""
    if not is_valid_time_label(label):
        raise ValidationError(f"Invalid time label: {text!r}, expected HH:MM")
    return label


def days_in_month(year: int, month: int) -> list[date | None]:
    """
    Month grid in row-major, Sunday-first weeks.

    Leading None cells fill the weekday offset of the 1st; trailing None cells
    complete the last week, so the length is always a multiple of 7.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if not date.min.year <= year <= date.max.year:
        raise ValidationError(f"Invalid year: {year}")

    first = date(year, month, 1)
    # date.weekday() is Monday=0; shift so Sunday is column 0
    leading = (first.weekday() + 1) % WEEK_LENGTH
    month_length = _stdlib_calendar.monthrange(year, month)[1]

    days: list[date | None] = [None] * leading
    days.extend(date(year, month, day) for day in range(1, month_length + 1))

    trailing = -len(days) % WEEK_LENGTH
    days.extend([None] * trailing)
    return days


def month_weeks(year: int, month: int) -> list[list[date | None]]:
    days = days_in_month(year, month)
    return [days[i : i + WEEK_LENGTH] for i in range(0, len(days), WEEK_LENGTH)]


def is_bookable(
    store: AvailabilityStorePort,
    station_id: str,
    day: date | datetime,
    today: date | None = None,
) -> bool:
    """True iff the date is not in the past and the station has at least one open slot on it."""
    if isinstance(day, datetime):
        day = day.date()
    if today is None:
        today = date.today()
    if day < today:
        return False
    return bool(store.list_slots(station_id, day))
