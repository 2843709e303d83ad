"""
Tests for reservation session persistence and the per-session use case.
"""

from __future__ import annotations

import threading

import pytest

from pubbot.application.use_cases.handle_reservation_message import HandleReservationMessageUseCase
from pubbot.domain.entities.conversation_state import ConversationState
from pubbot.infrastructure.store.memory_store import MemorySessionStore


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def use_case(store, manager) -> HandleReservationMessageUseCase:
    return HandleReservationMessageUseCase(store=store, manager=manager)


def test_memory_store_get_set_delete(store):
    """Unknown sessions read as None; delete is a no-op for missing ids."""
    assert store.get("s1") is None

    state = ConversationState(intent="reserve")
    store.set("s1", state)
    assert store.get("s1") is state
    assert len(store) == 1

    store.delete("s1")
    store.delete("s1")
    assert store.get("s1") is None
    assert len(store) == 0


def test_memory_store_concurrent_writes(store):
    def write(n: int) -> None:
        for i in range(100):
            store.set(f"s{n}-{i}", ConversationState())

    threads = [threading.Thread(target=write, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 800


def test_first_message_starts_session_and_persists_state(use_case, store):
    """A new session starts a reservation dialogue and stores the advanced state."""
    result = use_case.execute("abc", "today")

    assert result.state.intent == "reserve"
    assert result.state.slots.date == "2026-10-20"
    assert store.get("abc") == result.state


def test_session_state_carries_across_turns(use_case, store):
    use_case.execute("abc", "today")
    result = use_case.execute("abc", "19:00")

    assert result.reply == "How many people?"
    assert store.get("abc").slots.time == "19:00"


def test_sessions_are_isolated(use_case, store):
    use_case.execute("a", "today")
    result = use_case.execute("b", "tomorrow")

    assert result.state.slots.date == "2026-10-21"
    assert store.get("a").slots.date == "2026-10-20"


def test_failed_turn_still_persists_error_marker(use_case, store, fake_api):
    use_case.execute("abc", "today")
    fake_api.fail_next.add("get_working_hours")

    use_case.execute("abc", "19:00")

    saved = store.get("abc")
    assert saved.slots.time is None
    assert saved.last_api_error is not None


@pytest.mark.parametrize(
    "session_id,message",
    [("", "hi"), ("   ", "hi"), (None, "hi"), ("abc", ""), ("abc", "  "), ("abc", None)],
)
def test_blank_session_or_message_is_rejected(use_case, store, session_id, message):
    with pytest.raises(ValueError):
        use_case.execute(session_id, message)
    assert len(store) == 0
