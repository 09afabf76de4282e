#!/usr/bin/env python3
"""Smoke check of the booking API against a running server with demo data seeded."""

import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"
CUSTOMER = {"X-User-Id": "smoke-customer", "X-User-Role": "customer"}


def check_stations() -> dict | None:
    print("=" * 60)
    print("GET /api/v1/stations")
    print("=" * 60)

    try:
        response = httpx.get(f"{BASE_URL}/api/v1/stations", timeout=10.0)
        response.raise_for_status()
        stations = response.json()
        print(f"✅ {len(stations)} stations")
        for station in stations:
            print(f"  {station['id']}: {station['name']} ({len(station['services'])} services)")
        return stations[0] if stations else None
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None


def book_first_open_slot(station: dict) -> dict | None:
    print("\n" + "=" * 60)
    print(f"Booking at station {station['id']}")
    print("=" * 60)

    day = (date.today() + timedelta(days=1)).isoformat()
    slots = httpx.get(f"{BASE_URL}/api/v1/stations/{station['id']}/availability/{day}", timeout=10.0).json()["slots"]
    if not slots:
        print(f"❌ No open slots on {day}")
        return None

    draft = {
        "station_id": station["id"],
        "date": day,
        "time": slots[0],
        "service_ids": [station["services"][0]["id"]],
    }
    try:
        response = httpx.put(f"{BASE_URL}/api/v1/drafts/me", json=draft, headers=CUSTOMER, timeout=10.0)
        response.raise_for_status()
        print(f"✅ Draft staged: {day} {slots[0]}, total {response.json()['total_price']}")

        response = httpx.post(
            f"{BASE_URL}/api/v1/bookings",
            json={"payment_succeeded": True, "payment_reference": "smoke"},
            headers=CUSTOMER,
            timeout=10.0,
        )
        response.raise_for_status()
        booking = response.json()
        print(f"✅ Booking {booking['id']} {booking['status']}, reward={booking['reward_issued']}")
        return booking
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None


def cancel(booking: dict) -> bool:
    try:
        response = httpx.post(f"{BASE_URL}/api/v1/bookings/{booking['id']}/cancel", headers=CUSTOMER, timeout=10.0)
        response.raise_for_status()
        print(f"✅ Booking {booking['id']} {response.json()['status']}")
        return True
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False


def main():
    print("\n🚀 Smoke checking booking API\n")

    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
        print("✅ Server is running\n")
    except httpx.HTTPError:
        print("❌ Server is not running!")
        print("   Please start it with: uvicorn app.main:app --reload --port 8001")
        sys.exit(1)

    station = check_stations()
    if station is None:
        sys.exit(1)
    booking = book_first_open_slot(station)
    if booking is None or not cancel(booking):
        sys.exit(1)

    print("\n" + "=" * 60)
    print("✅ Smoke check complete!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
