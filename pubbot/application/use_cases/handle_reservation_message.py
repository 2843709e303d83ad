from __future__ import annotations

import logging

from pubbot.application.ports.session_store import SessionStorePort
from pubbot.application.use_cases.reservation_conversation import (
    ReservationConversationManager,
    TurnResult,
)


class HandleReservationMessageUseCase:
    def __init__(self, store: SessionStorePort, manager: ReservationConversationManager) -> None:
        self._store = store
        self._manager = manager
        self._logger = logging.getLogger(__name__)

    def execute(self, session_id: str | None, message: str | None) -> TurnResult:
        """Advance the session's reservation dialogue by one turn and persist the result."""
        if not session_id or not session_id.strip():
            raise ValueError("session_id is required")
        if not message or not message.strip():
            raise ValueError("message is required")

        state = self._store.get(session_id)
        if state is None:
            state = self._manager.start()
            self._logger.info("Reservation session started", extra={"session_id": session_id})

        result = self._manager.handle_input(state, message)
        self._store.set(session_id, result.state)

        next_slot = result.state.slots.next_missing()
        self._logger.info(
            "Reservation turn handled",
            extra={
                "session_id": session_id,
                "slot": next_slot.value if next_slot else "summary",
                "status": "confirmed" if result.state.confirmed else "collecting",
            },
        )
        return result
