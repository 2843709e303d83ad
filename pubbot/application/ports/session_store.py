from abc import ABC, abstractmethod

from pubbot.domain.entities.conversation_state import ConversationState


class SessionStorePort(ABC):
    @abstractmethod
    def get(self, session_id: str) -> ConversationState | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, session_id: str, state: ConversationState) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        raise NotImplementedError
