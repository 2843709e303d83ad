from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable
from zoneinfo import ZoneInfo

from pubbot.application.dto.reservation_api import (
    AvailabilityRequest,
    ReservationRequest,
    Room,
)
from pubbot.application.ports.reservation_api import ReservationApiPort
from pubbot.application.utils.date_parser import (
    is_not_past,
    is_valid_email,
    is_valid_name,
    is_valid_phone,
    normalize_date,
    normalize_time,
    parse_party_size,
    today_in,
)
from pubbot.domain.entities.conversation_state import (
    ConfirmedReservation,
    ConversationSlots,
    ConversationState,
    RoomChoice,
    RoomPreference,
    Slot,
    SuggestedSlot,
)

PROMPT_DATE = "Please provide a date (YYYY-MM-DD), today, or tomorrow."
PROMPT_TIME = "Please provide a valid time like 19:00 or 7pm."
PROMPT_PARTY_SIZE = "Please provide a party size between 1 and 50."
PROMPT_NAME = "Please provide your full name."
PROMPT_EMAIL = "Please provide a valid email address."
PROMPT_PHONE = "Please provide a valid phone number."
API_FAILURE_REPLY = "I couldn't reach the booking system, please try again."
EDITABLE_FIELDS = "date/time/party/room/name/email/phone/notes"
SUMMARY_FOOTER = f'Reply "confirm" to book or say what to change ({EDITABLE_FIELDS}).'
NOT_UNDERSTOOD_REPLY = (
    f'Sorry, I did not understand. Reply "confirm" to book, or specify what to change ({EDITABLE_FIELDS}).'
)

NEXT_SLOT_PROMPTS = {
    Slot.DATE: "What date would you like to book? (YYYY-MM-DD, today, tomorrow)",
    Slot.TIME: "Great. What time? (e.g., 19:00 or 7pm)",
    Slot.PARTY_SIZE: "How many people?",
    Slot.ROOM: 'Which room? Or say "no preference".',
    Slot.CUSTOMER_NAME: "Your name?",
    Slot.EMAIL: "Your email?",
    Slot.PHONE: "Your phone number?",
    Slot.NOTES: "Any notes for the staff? (or say 'none')",
}

EDIT_PROMPTS = {
    Slot.DATE: "Sure, what is the new date? (YYYY-MM-DD, today, tomorrow)",
    Slot.TIME: "Okay, what time?",
    Slot.PARTY_SIZE: "What party size?",
    Slot.ROOM: 'Which room? Or say "no preference".',
    Slot.CUSTOMER_NAME: "What name should the booking be under?",
    Slot.EMAIL: "What email should we send the confirmation to?",
    Slot.PHONE: "What phone number can we reach you on?",
    Slot.NOTES: "Any notes for the staff? (or say 'none')",
}

# Checked in order; first match wins. Word-start prefixes: "times" edits the time,
# "update" is not a date edit.
EDIT_KEYWORDS: tuple[tuple[re.Pattern[str], Slot], ...] = (
    (re.compile(r"\bdate"), Slot.DATE),
    (re.compile(r"\btime"), Slot.TIME),
    (re.compile(r"party|people|size"), Slot.PARTY_SIZE),
    (re.compile(r"\broom"), Slot.ROOM),
    (re.compile(r"\bname"), Slot.CUSTOMER_NAME),
    (re.compile(r"e-?mail|\bmail"), Slot.EMAIL),
    (re.compile(r"\bphone"), Slot.PHONE),
    (re.compile(r"\bnote"), Slot.NOTES),
)

CONFIRM_TOKENS = {"confirm", "book"}
NO_PREFERENCE_TOKENS = {"no preference", "no", "none", "any"}
EMPTY_NOTES_TOKENS = {"none", "no", "-", "nothing"}

MAX_SAMPLE_SLOTS = 6
MAX_SUGGESTIONS = 3


@dataclass(frozen=True)
class TurnResult:
    state: ConversationState
    reply: str


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


class ReservationConversationManager:
    """
    Slot-filling dialogue for table reservations.

    Each call to handle_input consumes one guest message and returns the next
    state plus a reply. States are immutable; on a booking-system failure the
    incoming state is returned unchanged apart from last_api_error.
    """

    def __init__(
        self,
        api: ReservationApiPort,
        timezone: ZoneInfo,
        id_factory: Callable[[], str] = new_idempotency_key,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._api = api
        self._timezone = timezone
        self._id_factory = id_factory
        self._today = today or (lambda: today_in(timezone))
        self._logger = logging.getLogger(__name__)

    def start(self) -> ConversationState:
        return ConversationState(intent="reserve")

    def handle_input(self, state: ConversationState, user_input: str) -> TurnResult:
        if state.confirmed:
            return TurnResult(state=state, reply=self._already_booked_reply(state))

        if state.intent != "reserve":
            state = replace(state, intent="reserve")

        slot = state.slots.next_missing()
        try:
            return self._advance(state, slot, user_input)
        except Exception as e:
            self._logger.error(
                "Booking system call failed",
                extra={"slot": slot.value if slot else "summary", "reason": str(e)},
            )
            return TurnResult(state=replace(state, last_api_error=str(e)), reply=API_FAILURE_REPLY)

    def _advance(self, state: ConversationState, slot: Slot | None, user_input: str) -> TurnResult:
        text = user_input.strip()

        if slot == Slot.DATE:
            return self._collect_date(state, text)
        if slot == Slot.TIME:
            return self._collect_time(state, text)
        if slot == Slot.PARTY_SIZE:
            return self._collect_party_size(state, text)
        if slot == Slot.ROOM:
            return self._collect_room(state, text)
        if slot == Slot.CUSTOMER_NAME:
            if not is_valid_name(text):
                return _reject(state, "invalid_name", PROMPT_NAME)
            return self._prompt_next(_fill(state, customer_name=text))
        if slot == Slot.EMAIL:
            if not is_valid_email(text):
                return _reject(state, "invalid_email", PROMPT_EMAIL)
            return self._prompt_next(_fill(state, email=text))
        if slot == Slot.PHONE:
            if not is_valid_phone(text):
                return _reject(state, "invalid_phone", PROMPT_PHONE)
            return self._prompt_next(_fill(state, phone=text))
        if slot == Slot.NOTES:
            notes = "" if text.lower() in EMPTY_NOTES_TOKENS else text
            return self._prompt_next(_fill(state, notes=notes))

        return self._handle_summary_reply(state, text)

    def _collect_date(self, state: ConversationState, text: str) -> TurnResult:
        today = self._today()
        parsed = normalize_date(text, self._timezone, reference_date=today)
        if not parsed or not is_not_past(parsed, self._timezone, reference_date=today):
            return _reject(state, "invalid_date", PROMPT_DATE)

        state = _fill(state, date=parsed)

        # A time kept from before a date edit must still be bookable on the new date
        if state.slots.time:
            hours = self._api.get_working_hours(parsed)
            if not hours.slots:
                return self._no_slots_on_date(state, parsed)
            if state.slots.time not in hours.slots:
                previous = state.slots.time
                state = _clear(state, Slot.TIME)
                preview = ", ".join(hours.slots[:MAX_SAMPLE_SLOTS])
                return TurnResult(
                    state=state,
                    reply=(
                        f"Noted {parsed}. {previous} isn't bookable that day. "
                        f"Slots include: {preview}. What time?"
                    ),
                )

        return self._after_core_slot(state)

    def _collect_time(self, state: ConversationState, text: str) -> TurnResult:
        parsed = normalize_time(text)
        if not parsed:
            return _reject(state, "invalid_time", PROMPT_TIME)

        booking_date = state.slots.date or ""
        hours = self._api.get_working_hours(booking_date)
        if not hours.slots:
            return self._no_slots_on_date(state, booking_date)
        if parsed not in hours.slots:
            preview = ", ".join(hours.slots[:MAX_SAMPLE_SLOTS])
            return _reject(
                state,
                "time_not_bookable",
                f"That time isn't available. Slots on {booking_date} include: {preview}. Pick one of those times.",
            )

        return self._after_core_slot(_fill(state, time=parsed))

    def _collect_party_size(self, state: ConversationState, text: str) -> TurnResult:
        size = parse_party_size(text)
        if size is None:
            return _reject(state, "invalid_party_size", PROMPT_PARTY_SIZE)
        return self._after_core_slot(_fill(state, party_size=size))

    def _collect_room(self, state: ConversationState, text: str) -> TurnResult:
        lowered = text.lower()
        if lowered in NO_PREFERENCE_TOKENS:
            return self._prompt_next(_fill(state, room=RoomPreference.no_preference()))

        rooms = self._api.get_rooms()
        match = _match_room(rooms, lowered)
        if match is None:
            options = ", ".join(room.name for room in rooms)
            return _reject(
                state,
                "unknown_room",
                f"I couldn't find a room called \"{text}\". Options: {options} (or say 'no preference').",
            )
        return self._prompt_next(_fill(state, room=RoomPreference.room(match.id, match.name)))

    def _after_core_slot(self, state: ConversationState) -> TurnResult:
        """Run the availability check once date, time and party size are all known."""
        slots = state.slots
        if not slots.has_booking_core():
            return self._prompt_next(state)

        availability = self._api.check_availability(
            AvailabilityRequest(
                date=slots.date,
                time=slots.time,
                party_size=slots.party_size,
                room_id=slots.room.room_id if slots.room.kind == RoomChoice.ROOM else None,
            )
        )

        if not availability.available:
            suggestions = tuple(
                SuggestedSlot(time=s.time, room_id=s.room_id, room_name=s.room_name)
                for s in availability.suggestions[:MAX_SUGGESTIONS]
            )
            state = replace(_clear(state, Slot.TIME), suggestions=suggestions)
            self._logger.info(
                "Requested slot unavailable",
                extra={"slot": "time", "status": "unavailable", "suggestions": len(suggestions)},
            )
            if suggestions:
                listed = " | ".join(
                    f"{s.time} in {s.room_name}" if s.room_name else s.time for s in suggestions
                )
                return TurnResult(
                    state=state,
                    reply=f"That slot isn't available. Suggestions: {listed}. Pick one or provide another time.",
                )
            return TurnResult(state=state, reply="That slot is not available. Please provide another time.")

        state = replace(state, suggestions=())
        if state.slots.next_missing() == Slot.ROOM:
            rooms_list = ", ".join(room.name for room in availability.rooms)
            return TurnResult(
                state=state,
                reply=f"We have availability. Any room preference? Options: {rooms_list} (or say 'no preference').",
            )
        return self._prompt_next(state)

    def _prompt_next(self, state: ConversationState) -> TurnResult:
        slot = state.slots.next_missing()
        if slot is not None:
            return TurnResult(state=state, reply=NEXT_SLOT_PROMPTS[slot])

        if not state.idempotency_key:
            state = replace(state, idempotency_key=self._id_factory())
        return TurnResult(state=state, reply=_summary(state.slots))

    def _handle_summary_reply(self, state: ConversationState, text: str) -> TurnResult:
        lowered = text.lower()
        if lowered in CONFIRM_TOKENS:
            return self._confirm(state)

        for pattern, slot in EDIT_KEYWORDS:
            if pattern.search(lowered):
                self._logger.info("Slot edit requested", extra={"slot": slot.value})
                edited = replace(_clear(state, slot), idempotency_key=None)
                return TurnResult(state=edited, reply=EDIT_PROMPTS[slot])

        return TurnResult(state=state, reply=NOT_UNDERSTOOD_REPLY)

    def _confirm(self, state: ConversationState) -> TurnResult:
        slots = state.slots
        key = state.idempotency_key or self._id_factory()
        created = self._api.create_reservation(
            ReservationRequest(
                customer_name=slots.customer_name,
                email=slots.email,
                phone=slots.phone,
                date=slots.date,
                time=slots.time,
                party_size=slots.party_size,
                reservation_type=slots.reservation_type,
                notes=slots.notes or None,
                room_id=slots.room.room_id if slots.room.kind == RoomChoice.ROOM else None,
            ),
            idempotency_key=key,
        )
        reservation = ConfirmedReservation(
            id=created.id,
            status=created.status,
            room_name=created.room_name,
            table_names=tuple(t.table_name for t in created.tables),
        )

        state = replace(
            state,
            confirmed=True,
            idempotency_key=key,
            reservation=reservation,
            last_api_error=None,
            last_error=None,
        )
        self._logger.info(
            "Reservation confirmed",
            extra={"reservation_id": reservation.id, "status": reservation.status},
        )
        return TurnResult(state=state, reply=_confirmation_reply(slots, reservation))

    def _no_slots_on_date(self, state: ConversationState, booking_date: str) -> TurnResult:
        return TurnResult(
            state=replace(_clear(state, Slot.DATE), last_error="no_slots_on_date"),
            reply=f"We have no bookable times on {booking_date}. Please choose another date.",
        )

    def _already_booked_reply(self, state: ConversationState) -> str:
        reservation_id = state.reservation.id if state.reservation else "unknown"
        return f"You're already booked (reservation #{reservation_id}). To make another booking, please start a new chat."


def _fill(state: ConversationState, **values) -> ConversationState:
    return replace(state, slots=replace(state.slots, **values), last_error=None)


def _clear(state: ConversationState, slot: Slot) -> ConversationState:
    return replace(state, slots=state.slots.cleared(slot))


def _reject(state: ConversationState, code: str, reply: str) -> TurnResult:
    return TurnResult(state=replace(state, last_error=code), reply=reply)


def _match_room(rooms: list[Room], lowered: str) -> Room | None:
    for room in rooms:
        if room.name.lower() == lowered or room.id.lower() == lowered:
            return room
    return None


def _room_label(slots: ConversationSlots) -> str:
    if slots.room.kind == RoomChoice.ROOM:
        return slots.room.room_name or slots.room.room_id or "No preference"
    return "No preference"


def _summary(slots: ConversationSlots) -> str:
    lines = [
        f"Please confirm: {slots.date} at {slots.time} for {slots.party_size}.",
        f"Name: {slots.customer_name}",
        f"Email: {slots.email}",
        f"Phone: {slots.phone}",
        f"Room: {_room_label(slots)}",
    ]
    if slots.notes:
        lines.append(f"Notes: {slots.notes}")
    lines.append(SUMMARY_FOOTER)
    return "\n".join(lines)


def _confirmation_reply(slots: ConversationSlots, reservation: ConfirmedReservation) -> str:
    tables = ", ".join(reservation.table_names) or "Assigned on arrival"
    room = reservation.room_name or (slots.room.room_name if slots.room.kind == RoomChoice.ROOM else None) or "Assigned on arrival"
    return "\n".join(
        [
            f"Booked! Reservation #{reservation.id} for {slots.date} at {slots.time}.",
            f"Room: {room}",
            f"Tables: {tables}",
            f"We sent a confirmation to {slots.email}.",
        ]
    )
