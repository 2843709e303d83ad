from __future__ import annotations

#!/usr/bin/env python3
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local reservation chat (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable session_id for the conversation
- Sends your typed messages through HandleReservationMessageUseCase
- Prints the reply and the slots collected so far
- Uses MockReservationApi unless RESERVATION_API_URL is set
"""

import os
import time

try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass


def _print_header(session_id: str) -> None:
    print("\nLocal Reservation Chat")
    print("-" * 60)
    print(f"session_id: {session_id}")
    print("Type your message and press Enter.")
    print("Commands: /new (new session), /state, /quit, /help")
    print("-" * 60)


def main() -> None:
    from pubbot.wiring.dependencies import (
        get_handle_reservation_message_use_case,
        get_session_store,
    )

    session_id = os.getenv("CHAT_SESSION_ID", "local_user_1")
    use_case = get_handle_reservation_message_use_case()
    store = get_session_store()
    _print_header(session_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new   -> start a new session_id")
            print("  /state -> show the collected slots")
            print("  /quit  -> exit")
            continue
        if cmd == "/new":
            store.delete(session_id)
            session_id = f"local_user_{int(time.time())}"
            print(f"New session_id: {session_id}")
            continue
        if cmd == "/state":
            state = store.get(session_id)
            if state is None:
                print("(no state yet)")
                continue
            print(f"slots: {state.slots}")
            print(f"confirmed: {state.confirmed}")
            if state.last_api_error:
                print(f"last_api_error: {state.last_api_error}")
            continue

        result = use_case.execute(session_id=session_id, message=user_text)

        print("\n--- Reply ---")
        print(result.reply)
        next_slot = result.state.slots.next_missing()
        print(f"(next: {next_slot.value if next_slot else 'confirm'}, confirmed: {result.state.confirmed})")
        print("-" * 60)


if __name__ == "__main__":
    main()
