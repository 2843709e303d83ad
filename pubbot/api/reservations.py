from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from pubbot.api.schemas import (
    ConversationStateSchema,
    ReservationChatRequest,
    ReservationChatResponse,
)
from pubbot.application.use_cases.handle_reservation_message import HandleReservationMessageUseCase
from pubbot.wiring.dependencies import get_handle_reservation_message_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/reservations/chat", response_model=ReservationChatResponse)
def reservation_chat(
    req: ReservationChatRequest,
    uc: HandleReservationMessageUseCase = Depends(get_handle_reservation_message_use_case),
):
    try:
        result = uc.execute(session_id=req.session_id, message=req.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ReservationChatResponse(
        reply=result.reply,
        state=ConversationStateSchema.from_state(result.state),
    )
