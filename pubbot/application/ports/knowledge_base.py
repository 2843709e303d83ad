from abc import ABC, abstractmethod


class KnowledgeBasePort(ABC):
    @abstractmethod
    def render_context(self) -> str:
        """Static business information formatted as prompt text."""
        raise NotImplementedError
