from __future__ import annotations

import threading

from pubbot.application.dto.reservation_api import AvailabilityRequest, ReservationRequest
from pubbot.infrastructure.reservations.mock_client import MockReservationApi

TUESDAY = "2026-10-20"
MONDAY = "2026-10-19"


def _request(party_size: int, time: str = "19:00", room_id: str | None = None) -> ReservationRequest:
    return ReservationRequest(
        customer_name="Jane Doe",
        email="jane@example.com",
        phone="+49 123 456789",
        date=TUESDAY,
        time=time,
        party_size=party_size,
        room_id=room_id,
    )


def test_half_hour_slots_until_an_hour_before_close():
    hours = MockReservationApi().get_working_hours(TUESDAY)
    assert hours.slots[0] == "16:00"
    assert hours.slots[-1] == "22:00"
    assert "19:30" in hours.slots


def test_closed_weekday_has_no_slots():
    assert MockReservationApi().get_working_hours(MONDAY).slots == []


def test_full_room_yields_suggestions():
    api = MockReservationApi()
    api.create_reservation(_request(12, room_id="snug"))

    result = api.check_availability(AvailabilityRequest(date=TUESDAY, time="19:00", party_size=2, room_id="snug"))

    assert result.available is False
    assert 0 < len(result.suggestions) <= 3
    assert all(s.time != "19:00" and s.room_id == "snug" for s in result.suggestions)


def test_idempotency_key_returns_same_reservation():
    api = MockReservationApi()
    first = api.create_reservation(_request(4), idempotency_key="k1")
    second = api.create_reservation(_request(4), idempotency_key="k1")
    third = api.create_reservation(_request(4), idempotency_key="k2")

    assert first == second
    assert third.id != first.id
    assert first.status == "confirmed"
    assert first.room_name == "Main Bar"


def test_concurrent_creates_with_same_key_book_once():
    api = MockReservationApi()
    results = []

    def create() -> None:
        results.append(api.create_reservation(_request(10, room_id="snug"), idempotency_key="same"))

    threads = [threading.Thread(target=create) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({r.id for r in results}) == 1
    # A second booking of 10 would not fit the 12-seat snug
    follow_up = api.check_availability(AvailabilityRequest(date=TUESDAY, time="19:00", party_size=2, room_id="snug"))
    assert follow_up.available is True
