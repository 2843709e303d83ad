from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta

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
from pubbot.application.ports.reservation_api import ReservationApiPort

DEFAULT_ROOMS = (
    Room(id="main", name="Main Bar", total_capacity=40),
    Room(id="garden", name="Beer Garden", total_capacity=60),
    Room(id="snug", name="The Snug", total_capacity=12),
)


class MockReservationApi(ReservationApiPort):
    """In-memory booking system for local runs: half-hour slots, capacity per room and slot."""

    def __init__(
        self,
        rooms: tuple[Room, ...] = DEFAULT_ROOMS,
        open_time: str = "16:00",
        close_time: str = "23:00",
        closed_weekdays: tuple[int, ...] = (0,),  # Mondays
    ) -> None:
        self._rooms = rooms
        self._open_time = open_time
        self._close_time = close_time
        self._closed_weekdays = closed_weekdays
        self._reservations: dict[str, CreatedReservation] = {}
        self._by_key: dict[str, str] = {}
        self._booked: dict[tuple[str, str, str], int] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get_rooms(self) -> list[Room]:
        return list(self._rooms)

    def get_working_hours(self, date: str) -> WorkingHours:
        day = datetime.strptime(date, "%Y-%m-%d")
        if day.weekday() in self._closed_weekdays:
            return WorkingHours(open=None, close=None, slots=[])

        slots: list[str] = []
        current = datetime.combine(day.date(), datetime.strptime(self._open_time, "%H:%M").time())
        # Last seating one hour before closing
        last = datetime.combine(day.date(), datetime.strptime(self._close_time, "%H:%M").time()) - timedelta(hours=1)
        while current <= last:
            slots.append(current.strftime("%H:%M"))
            current += timedelta(minutes=30)
        return WorkingHours(open=self._open_time, close=self._close_time, slots=slots)

    def check_availability(self, request: AvailabilityRequest) -> AvailabilityResult:
        with self._lock:
            rooms = self._free_rooms(request.date, request.time, request.party_size, request.room_id)
            if rooms:
                return AvailabilityResult(available=True, rooms=rooms, suggestions=[])

            suggestions: list[Suggestion] = []
            for slot in self.get_working_hours(request.date).slots:
                if slot == request.time:
                    continue
                for room in self._free_rooms(request.date, slot, request.party_size, request.room_id):
                    suggestions.append(Suggestion(time=slot, room_id=room.id, room_name=room.name))
                    break
                if len(suggestions) >= 3:
                    break
            return AvailabilityResult(available=False, rooms=[], suggestions=suggestions)

    def create_reservation(
        self,
        request: ReservationRequest,
        idempotency_key: str | None = None,
    ) -> CreatedReservation:
        # Dedupe check and booking happen under one lock so a repeated key never books twice
        with self._lock:
            if idempotency_key and idempotency_key in self._by_key:
                return self._reservations[self._by_key[idempotency_key]]

            rooms = self._free_rooms(request.date, request.time, request.party_size, request.room_id)
            room = rooms[0] if rooms else None
            reservation_id = f"mock_res_{uuid.uuid4().hex[:8]}"
            created = CreatedReservation(
                id=reservation_id,
                status="confirmed" if room else "pending",
                room_name=room.name if room else None,
                tables=[
                    ReservedTable(
                        table_name=f"{room.name} T{len(self._reservations) + 1}",
                        capacity=request.party_size,
                    )
                ]
                if room
                else [],
            )
            if room:
                key = (request.date, request.time, room.id)
                self._booked[key] = self._booked.get(key, 0) + request.party_size
            self._reservations[reservation_id] = created
            if idempotency_key:
                self._by_key[idempotency_key] = reservation_id

        self._logger.info("Mock reservation created", extra={"reservation_id": reservation_id, "status": created.status})
        return created

    def _free_rooms(self, date: str, time: str, party_size: int, room_id: str | None) -> list[Room]:
        if time not in self.get_working_hours(date).slots:
            return []
        free: list[Room] = []
        for room in self._rooms:
            if room_id and room.id != room_id:
                continue
            if self._booked.get((date, time, room.id), 0) + party_size <= room.total_capacity:
                free.append(room)
        return free
