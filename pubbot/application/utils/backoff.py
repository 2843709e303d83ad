from __future__ import annotations

import random
from typing import Callable

BASE_DELAY_MS = 300
MAX_JITTER_MS = 200


def backoff_ms(
    attempt: int,
    retry_after_seconds: float | None = None,
    rng: Callable[[], float] = random.random,
) -> int:
    """
    Delay before retry number `attempt` (0-based).

    A positive Retry-After wins over the computed value. Otherwise the delay
    doubles from 300ms with up to 200ms of jitter: ~300, ~600, ~1200...
    """
    if retry_after_seconds is not None and retry_after_seconds > 0:
        return int(retry_after_seconds * 1000)
    jitter = int(rng() * MAX_JITTER_MS)
    return BASE_DELAY_MS * (2 ** attempt) + jitter


def parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        # HTTP-date form is not used by the booking API
        return None
    return seconds if seconds > 0 else None
