from __future__ import annotations

from abc import ABC, abstractmethod

from pubbot.application.dto.reservation_api import (
    AvailabilityRequest,
    AvailabilityResult,
    CreatedReservation,
    ReservationRequest,
    Room,
    WorkingHours,
)


class ReservationApiPort(ABC):
    @abstractmethod
    def get_rooms(self) -> list[Room]:
        raise NotImplementedError

    @abstractmethod
    def get_working_hours(self, date: str) -> WorkingHours:
        """Bookable start times for a YYYY-MM-DD date."""
        raise NotImplementedError

    @abstractmethod
    def check_availability(self, request: AvailabilityRequest) -> AvailabilityResult:
        raise NotImplementedError

    @abstractmethod
    def create_reservation(
        self,
        request: ReservationRequest,
        idempotency_key: str | None = None,
    ) -> CreatedReservation:
        """
        Create a reservation. The booking system deduplicates on idempotency_key,
        so callers must reuse the same key for every attempt of one booking.
        """
        raise NotImplementedError
