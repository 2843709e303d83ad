from __future__ import annotations

from openai import OpenAI

from pubbot.application.exceptions import LLMContractError, LLMUpstreamError
from pubbot.application.ports.llm import LLMPort
from pubbot.core.config import settings
from pubbot.infrastructure.llm.prompts import build_system_prompt


class OpenAILLM(LLMPort):
    """
    OpenAI-backed adapter implementing LLMPort.

    Raises:
        LLMUpstreamError: networking/provider failures
        LLMContractError: empty completion
    """

    def __init__(self, client: OpenAI | None = None) -> None:
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)

    def answer(
        self,
        context: str,
        history: list[dict[str, str]],
        message: str,
    ) -> str:
        system_prompt = build_system_prompt(settings.PUB_NAME, context)
        messages = [{"role": "system", "content": system_prompt}]
        for turn in history:
            role = turn.get("role")
            content = (turn.get("content") or "").strip()
            if role in ("user", "assistant") and content:
                messages.append({"role": role, "content": content})
        messages.append({"role": "user", "content": message})

        try:
            resp = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL_CHAT,
                messages=messages,
                temperature=settings.OPENAI_TEMPERATURE_CHAT,
                max_tokens=settings.OPENAI_MAX_TOKENS,
                presence_penalty=0.1,
                frequency_penalty=0.1,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        return content
