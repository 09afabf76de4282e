"""
Tests for selection totals.
"""

from __future__ import annotations

from decimal import Decimal
from itertools import permutations

from conftest import make_station

from app.application.use_cases.selection import aggregate, resolve_services


def test_aggregate_sums_price_and_duration():
    station = make_station()

    totals = aggregate(station, {"s1", "s2"})

    assert totals.total_price == Decimal("50")
    assert totals.total_duration_minutes == 65


def test_aggregate_is_order_independent():
    station = make_station()
    results = {aggregate(station, list(order)) for order in permutations(["s1", "s2", "s3"])}

    assert len(results) == 1
    (totals,) = results
    assert totals.total_price == Decimal("75.50")
    assert totals.total_duration_minutes == 95


def test_unknown_ids_are_ignored():
    station = make_station()

    totals = aggregate(station, ["s2", "missing", "also-missing"])

    assert totals.total_price == Decimal("15")
    assert totals.total_duration_minutes == 20


def test_empty_selection_is_zero():
    totals = aggregate(make_station(), [])
    assert totals.total_price == Decimal("0")
    assert totals.total_duration_minutes == 0


def test_duplicate_ids_count_once():
    totals = aggregate(make_station(), ["s1", "s1"])
    assert totals.total_price == Decimal("35")


def test_resolve_services_keeps_catalog_order():
    services = resolve_services(make_station(), ["s3", "s1"])
    assert [s.id for s in services] == ["s1", "s3"]
