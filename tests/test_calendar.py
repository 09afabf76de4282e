"""
Tests for the month grid, date keys, time labels and bookability.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.application.exceptions import ValidationError
from app.application.utils.calendar import (
    date_key,
    days_in_month,
    is_bookable,
    is_valid_time_label,
    month_weeks,
    normalize_time_label,
    parse_date_key,
)
from app.infrastructure.store.memory_availability_store import MemoryAvailabilityStore


def test_january_2025_grid():
    """January 2025 starts on a Wednesday: three leading blanks, then the 31 days."""
    days = days_in_month(2025, 1)

    assert days[:3] == [None, None, None]
    assert days[3:34] == [date(2025, 1, d) for d in range(1, 32)]
    assert len(days) % 7 == 0
    assert all(cell is None for cell in days[34:])


def test_month_starting_on_sunday_has_no_padding():
    """February 2026 starts on a Sunday and spans exactly four weeks."""
    days = days_in_month(2026, 2)

    assert days[0] == date(2026, 2, 1)
    assert len(days) == 28
    assert len(month_weeks(2026, 2)) == 4


def test_leap_february():
    days = [d for d in days_in_month(2024, 2) if d is not None]
    assert days[-1] == date(2024, 2, 29)


def test_month_weeks_are_seven_wide():
    weeks = month_weeks(2025, 3)
    assert all(len(week) == 7 for week in weeks)
    assert weeks[0][6] == date(2025, 3, 1)  # Saturday column


def test_invalid_month_rejected():
    with pytest.raises(ValidationError):
        days_in_month(2025, 13)


def test_date_key_round_trip():
    assert date_key(date(2025, 1, 5)) == "2025-01-05"
    assert parse_date_key("2025-01-05") == date(2025, 1, 5)

    with pytest.raises(ValidationError):
        parse_date_key("05/01/2025")


@pytest.mark.parametrize("label", ["00:00", "09:00", "13:45", "23:59"])
def test_valid_time_labels(label):
    assert is_valid_time_label(label)


@pytest.mark.parametrize("label", ["9:00", "24:00", "12:60", "noon", "", "09:00:00"])
def test_invalid_time_labels(label):
    assert not is_valid_time_label(label)
    with pytest.raises(ValidationError):
        normalize_time_label(label)


def test_normalize_strips_whitespace():
    assert normalize_time_label(" 09:30 ") == "09:30"


def test_is_bookable():
    """A date is bookable only when it is not in the past and has an open slot."""
    store = MemoryAvailabilityStore()
    today = date(2025, 1, 10)
    store.publish_slots("S1", date(2025, 1, 9), ["09:00"])
    store.publish_slots("S1", date(2025, 1, 10), ["09:00"])
    store.publish_slots("S1", date(2025, 1, 12), [])

    assert is_bookable(store, "S1", date(2025, 1, 9), today) is False
    assert is_bookable(store, "S1", date(2025, 1, 10), today) is True
    assert is_bookable(store, "S1", date(2025, 1, 11), today) is False
    assert is_bookable(store, "S1", date(2025, 1, 12), today) is False
    assert is_bookable(store, "S2", date(2025, 1, 10), today) is False
