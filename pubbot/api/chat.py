from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from pubbot.api.schemas import ChatRequest, ChatResponse
from pubbot.application.exceptions import LLMContractError, LLMUpstreamError
from pubbot.application.use_cases.answer_question import AnswerQuestionUseCase
from pubbot.wiring.dependencies import get_answer_question_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse)
def chat(
    req: ChatRequest,
    uc: AnswerQuestionUseCase = Depends(get_answer_question_use_case),
):
    try:
        answer = uc.execute(
            message=req.message,
            history=[m.model_dump() for m in req.conversation],
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (LLMUpstreamError, LLMContractError) as e:
        logger.error("Chat answer failed", extra={"reason": str(e)})
        raise HTTPException(status_code=502, detail="Chat is temporarily unavailable. Please try again later.")

    return ChatResponse(response=answer)
