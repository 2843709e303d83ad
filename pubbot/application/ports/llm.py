from abc import ABC, abstractmethod


class LLMPort(ABC):
    @abstractmethod
    def answer(
        self,
        context: str,
        history: list[dict[str, str]],
        message: str,
    ) -> str:
        """
        Answer a guest question.

        Args:
            context: Formatted pub information (hours, menu, policies)
            history: Previous turns as {"role": "user"|"assistant", "content": str}
            message: The current guest message

        Returns:
            Reply text (never empty)
        """
        raise NotImplementedError
