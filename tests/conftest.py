from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from pubbot.application.dto.reservation_api import (
    AvailabilityRequest,
    AvailabilityResult,
    CreatedReservation,
    ReservationRequest,
    ReservedTable,
    Room,
    Suggestion,
    WorkingHours,
)
from pubbot.application.exceptions import ReservationNetworkError
from pubbot.application.ports.reservation_api import ReservationApiPort
from pubbot.application.use_cases.reservation_conversation import ReservationConversationManager

TODAY = date(2026, 10, 20)
BERLIN = ZoneInfo("Europe/Berlin")
SLOTS = ["17:00", "17:30", "18:00", "18:30", "19:00", "19:30", "20:00", "20:30"]


class FakeReservationApi(ReservationApiPort):
    """Scripted booking system; set fail_next to make the next call of a method raise."""

    def __init__(self) -> None:
        self.rooms = [
            Room(id="r1", name="Main Bar", total_capacity=40),
            Room(id="r2", name="Beer Garden", total_capacity=60),
        ]
        self.hours = WorkingHours(open="17:00", close="23:00", slots=list(SLOTS))
        self.availability = AvailabilityResult(available=True, rooms=list(self.rooms), suggestions=[])
        self.created = CreatedReservation(
            id="res-42",
            status="confirmed",
            room_name="Main Bar",
            tables=[ReservedTable(table_name="T4", capacity=4)],
        )
        self.fail_next: set[str] = set()
        self.calls: list[tuple[str, object]] = []

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail_next:
            self.fail_next.discard(name)
            raise ReservationNetworkError("Reservation API unreachable: connection refused")

    def get_rooms(self) -> list[Room]:
        self.calls.append(("get_rooms", None))
        self._maybe_fail("get_rooms")
        return list(self.rooms)

    def get_working_hours(self, date: str) -> WorkingHours:
        self.calls.append(("get_working_hours", date))
        self._maybe_fail("get_working_hours")
        return self.hours

    def check_availability(self, request: AvailabilityRequest) -> AvailabilityResult:
        self.calls.append(("check_availability", request))
        self._maybe_fail("check_availability")
        return self.availability

    def create_reservation(
        self,
        request: ReservationRequest,
        idempotency_key: str | None = None,
    ) -> CreatedReservation:
        self.calls.append(("create_reservation", (request, idempotency_key)))
        self._maybe_fail("create_reservation")
        return self.created

    def called(self, name: str) -> list[object]:
        return [arg for call, arg in self.calls if call == name]


def unavailable(*suggestions: Suggestion) -> AvailabilityResult:
    return AvailabilityResult(available=False, rooms=[], suggestions=list(suggestions))


@pytest.fixture
def fake_api() -> FakeReservationApi:
    return FakeReservationApi()


@pytest.fixture
def key_factory():
    counter = {"n": 0}

    def _next() -> str:
        counter["n"] += 1
        return f"key-{counter['n']}"

    return _next


@pytest.fixture
def manager(fake_api, key_factory) -> ReservationConversationManager:
    return ReservationConversationManager(
        api=fake_api,
        timezone=BERLIN,
        id_factory=key_factory,
        today=lambda: TODAY,
    )
