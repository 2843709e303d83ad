from __future__ import annotations

import logging

from pubbot.application.ports.knowledge_base import KnowledgeBasePort
from pubbot.application.ports.llm import LLMPort

MAX_HISTORY = 10


class AnswerQuestionUseCase:
    def __init__(self, llm: LLMPort, kb: KnowledgeBasePort) -> None:
        self._llm = llm
        self._kb = kb
        self._logger = logging.getLogger(__name__)

    def execute(self, message: str, history: list[dict[str, str]] | None = None) -> str:
        if not message or not message.strip():
            raise ValueError("message is required")

        context = self._kb.render_context()
        recent = list(history or [])[-MAX_HISTORY:]
        answer = self._llm.answer(context, recent, message.strip())

        self._logger.info("Guest question answered", extra={"reason": f"history={len(recent)}"})
        return answer
