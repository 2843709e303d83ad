import logging

from fastapi import FastAPI

from pubbot.api.chat import router as chat_router
from pubbot.api.reservations import router as reservations_router
from pubbot.core.config import settings

CONTEXT_KEYS = ("session_id", "slot", "status", "path", "attempt", "delay_ms", "reservation_id", "reason")


class ContextFormatter(logging.Formatter):
    """Appends the reservation context passed via `extra=` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{base} | {' '.join(pairs)}" if pairs else base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=f"{settings.PUB_NAME} Assistant", version="1.0.0")

app.include_router(reservations_router, tags=["reservations"])
app.include_router(chat_router, tags=["chat"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.ENV}
