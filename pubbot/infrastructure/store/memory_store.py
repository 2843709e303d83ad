from __future__ import annotations

import threading

from pubbot.application.ports.session_store import SessionStorePort
from pubbot.domain.entities.conversation_state import ConversationState


class MemorySessionStore(SessionStorePort):
    """Process-lifetime session map. States are immutable, so sharing them is safe."""

    def __init__(self) -> None:
        self._states: dict[str, ConversationState] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ConversationState | None:
        with self._lock:
            return self._states.get(session_id)

    def set(self, session_id: str, state: ConversationState) -> None:
        with self._lock:
            self._states[session_id] = state

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._states.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
