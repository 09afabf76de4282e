"""
Tests shared by the in-memory and JSON availability stores.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest

from app.application.exceptions import SlotUnavailable, ValidationError
from app.infrastructure.store.json_store import JsonAvailabilityStore
from app.infrastructure.store.memory_availability_store import MemoryAvailabilityStore

DAY = date(2025, 1, 15)


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "json":
        return JsonAvailabilityStore(data_dir=str(tmp_path))
    return MemoryAvailabilityStore()


def test_list_slots_empty_when_nothing_published(store):
    assert store.list_slots("S1", DAY) == []


def test_publish_deduplicates_and_sorts(store):
    published = store.publish_slots("S1", DAY, ["15:00", "09:00", "10:00", "09:00"])

    assert published == ["09:00", "10:00", "15:00"]
    assert store.list_slots("S1", DAY) == ["09:00", "10:00", "15:00"]


def test_publish_is_a_full_replace(store):
    store.publish_slots("S1", DAY, ["09:00", "10:00"])
    store.publish_slots("S1", DAY, ["11:00"])

    assert store.list_slots("S1", DAY) == ["11:00"]


def test_publish_rejects_bad_label_without_change(store):
    store.publish_slots("S1", DAY, ["09:00"])

    with pytest.raises(ValidationError):
        store.publish_slots("S1", DAY, ["10:00", "25:00"])

    assert store.list_slots("S1", DAY) == ["09:00"]


def test_publish_empty_withdraws_the_date(store):
    store.publish_slots("S1", DAY, ["09:00"])
    store.publish_slots("S1", date(2025, 1, 16), ["10:00"])

    store.publish_slots("S1", DAY, [])

    assert store.list_dates("S1") == {"2025-01-16": ["10:00"]}


def test_reserve_removes_slot(store):
    store.publish_slots("S1", DAY, ["09:00", "10:00"])

    store.reserve_slot("S1", DAY, "09:00")

    assert store.list_slots("S1", DAY) == ["10:00"]


def test_reserve_missing_slot_fails_without_change(store):
    store.publish_slots("S1", DAY, ["10:00"])

    with pytest.raises(SlotUnavailable):
        store.reserve_slot("S1", DAY, "09:00")

    assert store.list_slots("S1", DAY) == ["10:00"]


def test_release_is_idempotent_and_sorted(store):
    store.publish_slots("S1", DAY, ["10:00", "14:00"])

    store.release_slot("S1", DAY, "12:00")
    store.release_slot("S1", DAY, "12:00")

    assert store.list_slots("S1", DAY) == ["10:00", "12:00", "14:00"]


def test_release_then_reserve_restores_listing(store):
    store.publish_slots("S1", DAY, ["09:00", "10:00"])
    before = store.list_slots("S1", DAY)

    store.release_slot("S1", DAY, "11:00")
    store.reserve_slot("S1", DAY, "11:00")

    assert store.list_slots("S1", DAY) == before


def test_withdraw_slot(store):
    store.publish_slots("S1", DAY, ["09:00", "10:00"])

    assert store.withdraw_slot("S1", DAY, "09:00") is True
    assert store.withdraw_slot("S1", DAY, "09:00") is False
    assert store.list_slots("S1", DAY) == ["10:00"]


def test_stations_are_independent(store):
    store.publish_slots("S1", DAY, ["09:00"])
    store.publish_slots("S2", DAY, ["09:00"])

    store.reserve_slot("S1", DAY, "09:00")

    assert store.list_slots("S1", DAY) == []
    assert store.list_slots("S2", DAY) == ["09:00"]


def test_concurrent_reserve_has_single_winner(store):
    """Many threads racing for one slot: exactly one reservation succeeds."""
    store.publish_slots("S1", DAY, ["09:00"])
    barrier = threading.Barrier(8)

    def attempt() -> bool:
        barrier.wait()
        try:
            store.reserve_slot("S1", DAY, "09:00")
            return True
        except SlotUnavailable:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: attempt(), range(8)))

    assert results.count(True) == 1
    assert store.list_slots("S1", DAY) == []


def test_reserve_and_withdraw_normalize_labels(store):
    store.publish_slots("S1", DAY, ["09:00", "10:00"])

    store.reserve_slot("S1", DAY, " 09:00")
    assert store.withdraw_slot("S1", DAY, "10:00 ") is True

    assert store.list_slots("S1", DAY) == []


def test_reserve_and_withdraw_reject_bad_labels(store):
    store.publish_slots("S1", DAY, ["09:00"])

    with pytest.raises(ValidationError):
        store.reserve_slot("S1", DAY, "9am")
    with pytest.raises(ValidationError):
        store.withdraw_slot("S1", DAY, "25:00")

    assert store.list_slots("S1", DAY) == ["09:00"]


def test_reads_of_unpublished_dates_leave_no_locks_behind(store):
    for offset in range(2000):
        store.list_slots("S1", date(2030, 1, 1) + timedelta(days=offset))
    store.publish_slots("S1", DAY, ["09:00"])
    store.reserve_slot("S1", DAY, "09:00")

    assert len(store._locks) == 0


def test_similar_station_ids_do_not_share_slots(store):
    store.publish_slots("a.b", DAY, ["09:00"])
    store.publish_slots("a_b", DAY, ["10:00"])

    assert store.list_slots("a.b", DAY) == ["09:00"]
    assert store.list_slots("a_b", DAY) == ["10:00"]
    assert store.list_dates("a.b") == {"2025-01-15": ["09:00"]}
