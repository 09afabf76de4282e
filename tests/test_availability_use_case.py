from datetime import date
from decimal import Decimal

import pytest
from conftest import BOOKING_DAY, OWNER, TODAY, build_engine

from app.application.exceptions import Forbidden, NotFound, ValidationError
from app.domain.entities.current_user import CurrentUser
from app.domain.entities.service import Service
from app.infrastructure.catalog.demo_stations import seed_demo_data
from app.infrastructure.store.memory_availability_store import MemoryAvailabilityStore
from app.infrastructure.store.memory_store import MemoryStationRepository


def test_publish_requires_station_owner():
    e = build_engine()
    stranger = CurrentUser(id="owner-2", role="owner")
    customer = CurrentUser(id=OWNER.id, role="customer")

    with pytest.raises(Forbidden):
        e.slots.publish_slots(stranger, "S1", BOOKING_DAY, ["09:00"])
    with pytest.raises(Forbidden):
        e.slots.publish_slots(customer, "S1", BOOKING_DAY, ["09:00"])
    with pytest.raises(NotFound):
        e.slots.publish_slots(OWNER, "missing", BOOKING_DAY, ["09:00"])

    assert e.slots.list_slots("S1", BOOKING_DAY) == []


def test_publish_normalizes_and_validates():
    e = build_engine()

    assert e.slots.publish_slots(OWNER, "S1", BOOKING_DAY, [" 14:00", "09:00", "14:00"]) == ["09:00", "14:00"]
    with pytest.raises(ValidationError):
        e.slots.publish_slots(OWNER, "S1", BOOKING_DAY, ["25:00"])
    assert e.slots.list_slots("S1", BOOKING_DAY) == ["09:00", "14:00"]


def test_publish_empty_list_clears_date():
    e = build_engine()
    e.slots.publish_slots(OWNER, "S1", BOOKING_DAY, ["09:00"])

    assert e.slots.publish_slots(OWNER, "S1", BOOKING_DAY, []) == []
    assert e.slots.list_dates("S1") == {}


def test_republish_does_not_reopen_booked_time(engine):
    draft = engine.booking.stage_draft("alice", "S1", BOOKING_DAY, "09:00", ["s1"], today=TODAY)
    engine.booking.confirm_booking(draft, "alice")

    slots = engine.slots.publish_slots(OWNER, "S1", BOOKING_DAY, ["09:00", "10:00", "11:00"])

    assert slots == ["10:00", "11:00"]


def test_add_and_remove_slot(engine):
    assert engine.slots.add_slot(OWNER, "S1", BOOKING_DAY, "08:30") == ["08:30", "09:00", "10:00"]
    # Adding twice is a no-op
    assert engine.slots.add_slot(OWNER, "S1", BOOKING_DAY, "08:30") == ["08:30", "09:00", "10:00"]

    assert engine.slots.remove_slot(OWNER, "S1", BOOKING_DAY, "09:00") == ["08:30", "10:00"]
    assert engine.slots.remove_slot(OWNER, "S1", BOOKING_DAY, "09:00") == ["08:30", "10:00"]


def test_add_slot_skips_booked_time(engine):
    draft = engine.booking.stage_draft("alice", "S1", BOOKING_DAY, "09:00", ["s1"], today=TODAY)
    engine.booking.confirm_booking(draft, "alice")

    assert engine.slots.add_slot(OWNER, "S1", BOOKING_DAY, "09:00") == ["10:00"]


def test_remove_slot_rejects_other_owner(engine):
    with pytest.raises(Forbidden):
        engine.slots.remove_slot(CurrentUser(id="owner-2", role="owner"), "S1", BOOKING_DAY, "09:00")
    assert engine.slots.list_slots("S1", BOOKING_DAY) == ["09:00", "10:00"]


def test_is_bookable(engine):
    assert engine.slots.is_bookable("S1", BOOKING_DAY, today=TODAY) is True
    assert engine.slots.is_bookable("S1", date(2025, 1, 16), today=TODAY) is False
    assert engine.slots.is_bookable("S1", BOOKING_DAY, today=date(2025, 1, 20)) is False
    with pytest.raises(NotFound):
        engine.slots.is_bookable("missing", BOOKING_DAY, today=TODAY)


def test_calendar_month(engine):
    days = engine.slots.calendar_month("S1", 2025, 1, today=TODAY)

    # January 2025 starts on a Wednesday
    assert days[:3] == [None, None, None]
    assert len(days) % 7 == 0
    bookable = [d.date for d in days if d is not None and d.bookable]
    assert bookable == [BOOKING_DAY]


def test_list_dates_only_open_days(engine):
    engine.slots.publish_slots(OWNER, "S1", date(2025, 1, 20), ["12:00"])
    engine.slots.remove_slot(OWNER, "S1", date(2025, 1, 20), "12:00")

    assert engine.slots.list_dates("S1") == {"2025-01-15": ["09:00", "10:00"]}


def test_replace_services_validation(engine):
    with pytest.raises(ValidationError):
        engine.catalog.replace_services(
            OWNER,
            "S1",
            [
                Service(id="a", name="A", duration_minutes=10, price=Decimal("1")),
                Service(id="a", name="B", duration_minutes=10, price=Decimal("1")),
            ],
        )
    with pytest.raises(ValidationError):
        engine.catalog.replace_services(
            OWNER, "S1", [Service(id="a", name="A", duration_minutes=0, price=Decimal("1"))]
        )
    with pytest.raises(Forbidden):
        engine.catalog.replace_services(
            CurrentUser(id="owner-2", role="owner"),
            "S1",
            [Service(id="a", name="A", duration_minutes=10, price=Decimal("1"))],
        )


def test_list_owner_stations(engine):
    assert [s.id for s in engine.catalog.list_owner_stations(OWNER)] == ["S1"]
    assert engine.catalog.list_owner_stations(CurrentUser(id=OWNER.id, role="customer")) == []


def test_demo_seed_is_relative_to_today_and_idempotent():
    stations = MemoryStationRepository()
    store = MemoryAvailabilityStore()

    seed_demo_data(stations, store, today=TODAY)
    store.reserve_slot("1", date(2025, 1, 11), "09:00")
    seed_demo_data(stations, store, today=TODAY)

    assert [s.id for s in stations.list_all()] == ["1", "2", "3"]
    assert sorted(store.list_dates("1")) == ["2025-01-11", "2025-01-12", "2025-01-13"]
    assert "09:00" not in store.list_slots("1", date(2025, 1, 11))
