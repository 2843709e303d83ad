from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)


class Room(_ApiModel):
    id: str
    name: str
    total_capacity: int = 0


class WorkingHours(_ApiModel):
    open: str | None = None  # HH:MM
    close: str | None = None  # HH:MM
    slots: list[str] = Field(default_factory=list)  # bookable start times, HH:MM


class Suggestion(_ApiModel):
    time: str
    room_id: str | None = None
    room_name: str | None = None


class AvailabilityRequest(_ApiModel):
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    party_size: int
    room_id: str | None = None


class AvailabilityResult(_ApiModel):
    available: bool = False
    rooms: list[Room] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)


class ReservationRequest(_ApiModel):
    customer_name: str
    email: str
    phone: str
    date: str
    time: str
    party_size: int
    reservation_type: str = "dining"
    notes: str | None = None
    room_id: str | None = None


class ReservedTable(_ApiModel):
    table_name: str
    capacity: int = 0


class CreatedReservation(_ApiModel):
    id: str
    status: str = "confirmed"
    room_name: str | None = None
    tables: list[ReservedTable] = Field(default_factory=list)
