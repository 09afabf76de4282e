from __future__ import annotations

import sys
from datetime import date, timedelta

sys.path.insert(0, ".")

from app.application.exceptions import BookingConflict
from app.core.config import Settings
from app.infrastructure.catalog.demo_stations import DEMO_OWNER_ID
from app.wiring.dependencies import build_container, set_container, get_availability_use_case, get_booking_use_case


def main():
    container = build_container(Settings(STORE_PROVIDER="memory", REWARD_POLICY="random"))
    set_container(container)
    booking_uc = get_booking_use_case()
    availability_uc = get_availability_use_case()

    day = date.today() + timedelta(days=1)
    print(f"Station 1 on {day}: {availability_uc.list_slots('1', day)}")

    alice = booking_uc.stage_draft("alice", "1", day, "09:00", ["s1", "s2"])
    bob = booking_uc.stage_draft("bob", "1", day, "09:00", ["s3"])
    print(f"✅ Drafts staged: alice {alice.total_price}, bob {bob.total_price}")

    booking = booking_uc.confirm_booking(alice, "alice")
    print(f"✅ alice booked {booking.time}, reward={booking.reward_issued}")

    try:
        booking_uc.confirm_booking(bob, "bob")
    except BookingConflict as e:
        print(f"✅ bob rejected: {e}")

    print(f"Open after booking: {availability_uc.list_slots('1', day)}")

    booking_uc.cancel_booking(booking.id, "alice")
    print(f"✅ alice cancelled, open again: {availability_uc.list_slots('1', day)}")

    booking = booking_uc.confirm_booking(booking_uc.stage_draft("bob", "1", day, "09:00", ["s3"]), "bob")
    booking_uc.complete_booking(booking.id, DEMO_OWNER_ID)
    print(f"✅ bob's booking completed: {booking_uc.list_bookings('bob')[0].status.value}")


if __name__ == "__main__":
    main()
