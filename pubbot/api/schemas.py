from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field

from pubbot.domain.entities.conversation_state import ConversationState, RoomChoice


class ReservationChatRequest(BaseModel):
    session_id: str = Field(min_length=1, validation_alias=AliasChoices("session_id", "sessionId"))
    message: str = Field(min_length=1)


class SlotsSchema(BaseModel):
    date: str | None = None
    time: str | None = None
    party_size: int | None = None
    room_preference: RoomChoice = RoomChoice.NOT_ASKED
    room_id: str | None = None
    room_name: str | None = None
    customer_name: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    reservation_type: str = "dining"


class SuggestionSchema(BaseModel):
    time: str
    room_id: str | None = None
    room_name: str | None = None


class ReservationSchema(BaseModel):
    id: str
    status: str
    room_name: str | None = None
    tables: list[str] = Field(default_factory=list)


class ConversationStateSchema(BaseModel):
    intent: Literal["reserve", "idle"]
    slots: SlotsSchema
    confirmed: bool
    suggestions: list[SuggestionSchema] = Field(default_factory=list)
    reservation: ReservationSchema | None = None
    last_error: str | None = None

    @classmethod
    def from_state(cls, state: ConversationState) -> ConversationStateSchema:
        slots = state.slots
        return cls(
            intent=state.intent,
            slots=SlotsSchema(
                date=slots.date,
                time=slots.time,
                party_size=slots.party_size,
                room_preference=slots.room.kind,
                room_id=slots.room.room_id,
                room_name=slots.room.room_name,
                customer_name=slots.customer_name,
                email=slots.email,
                phone=slots.phone,
                notes=slots.notes,
                reservation_type=slots.reservation_type,
            ),
            confirmed=state.confirmed,
            suggestions=[
                SuggestionSchema(time=s.time, room_id=s.room_id, room_name=s.room_name)
                for s in state.suggestions
            ],
            reservation=ReservationSchema(
                id=state.reservation.id,
                status=state.reservation.status,
                room_name=state.reservation.room_name,
                tables=list(state.reservation.table_names),
            )
            if state.reservation
            else None,
            last_error=state.last_error,
        )


class ReservationChatResponse(BaseModel):
    reply: str
    state: ConversationStateSchema


class ChatMessageSchema(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    conversation: list[ChatMessageSchema] = Field(default_factory=list)


class ChatResponse(BaseModel):
    response: str
