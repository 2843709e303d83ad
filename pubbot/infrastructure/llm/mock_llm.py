from __future__ import annotations

from pubbot.application.ports.llm import LLMPort


class MockLLM(LLMPort):
    def answer(self, context: str, history: list[dict[str, str]], message: str) -> str:
        normalized = message.lower()
        if any(word in normalized for word in ("hours", "open", "close")):
            topic = "opening hours"
        elif any(word in normalized for word in ("beer", "tap", "drink")):
            topic = "beer"
        elif any(word in normalized for word in ("pizza", "food", "eat")):
            topic = "food"
        elif any(word in normalized for word in ("book", "reserv", "table")):
            return "You can book a table through our reservation chat."
        else:
            topic = "the pub"

        has_context = bool(context.strip())
        suffix = "" if has_context else " (no pub information loaded)"
        return f"Mock answer about {topic}.{suffix}"
