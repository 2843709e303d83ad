from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class Slot(str, Enum):
    DATE = "date"
    TIME = "time"
    PARTY_SIZE = "party_size"
    ROOM = "room_id"
    CUSTOMER_NAME = "customer_name"
    EMAIL = "email"
    PHONE = "phone"
    NOTES = "notes"


class RoomChoice(str, Enum):
    NOT_ASKED = "not_asked"
    NO_PREFERENCE = "no_preference"
    ROOM = "room"


@dataclass(frozen=True)
class SuggestedSlot:
    time: str  # HH:MM
    room_id: str | None = None
    room_name: str | None = None


@dataclass(frozen=True)
class ConfirmedReservation:
    id: str
    status: str = "confirmed"
    room_name: str | None = None
    table_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class RoomPreference:
    kind: RoomChoice = RoomChoice.NOT_ASKED
    room_id: str | None = None
    room_name: str | None = None

    @classmethod
    def not_asked(cls) -> RoomPreference:
        return cls()

    @classmethod
    def no_preference(cls) -> RoomPreference:
        return cls(kind=RoomChoice.NO_PREFERENCE)

    @classmethod
    def room(cls, room_id: str, room_name: str | None = None) -> RoomPreference:
        return cls(kind=RoomChoice.ROOM, room_id=room_id, room_name=room_name)

    @property
    def is_decided(self) -> bool:
        return self.kind != RoomChoice.NOT_ASKED


@dataclass(frozen=True)
class ConversationSlots:
    date: str | None = None  # YYYY-MM-DD
    time: str | None = None  # HH:MM, 24h
    party_size: int | None = None
    room: RoomPreference = RoomPreference()
    customer_name: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = ""  # None only while an edit of the notes is pending
    reservation_type: str = "dining"

    def next_missing(self) -> Slot | None:
        """First unfilled slot in collection order, or None when ready to confirm."""
        if not self.date:
            return Slot.DATE
        if not self.time:
            return Slot.TIME
        if not self.party_size:
            return Slot.PARTY_SIZE
        if not self.room.is_decided:
            return Slot.ROOM
        if not self.customer_name:
            return Slot.CUSTOMER_NAME
        if not self.email:
            return Slot.EMAIL
        if not self.phone:
            return Slot.PHONE
        if self.notes is None:
            return Slot.NOTES
        return None

    def has_booking_core(self) -> bool:
        return bool(self.date and self.time and self.party_size)

    def cleared(self, slot: Slot) -> ConversationSlots:
        if slot == Slot.ROOM:
            return replace(self, room=RoomPreference.not_asked())
        return replace(self, **{slot.value: None})


@dataclass(frozen=True)
class ConversationState:
    intent: str = "idle"  # "reserve" | "idle"
    slots: ConversationSlots = ConversationSlots()
    confirmed: bool = False
    suggestions: tuple[SuggestedSlot, ...] = field(default_factory=tuple)
    idempotency_key: str | None = None
    reservation: ConfirmedReservation | None = None
    last_api_error: str | None = None
    last_error: str | None = None
