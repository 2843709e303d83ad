from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from pubbot.application.dto.reservation_api import (
    AvailabilityRequest,
    AvailabilityResult,
    CreatedReservation,
    ReservationRequest,
    Room,
    WorkingHours,
)
from pubbot.application.exceptions import (
    ReservationConfigError,
    ReservationContractError,
    ReservationHttpError,
    ReservationNetworkError,
)
from pubbot.application.ports.reservation_api import ReservationApiPort
from pubbot.application.utils.backoff import backoff_ms, parse_retry_after


class ReservationApiClient(ReservationApiPort):
    """
    httpx-backed client for the external booking system.

    Retries 429/5xx and transport failures with exponential backoff. Missing
    base URL or API key is reported on the first call, not at construction.
    """

    def __init__(
        self,
        base_url: str | None,
        api_key: str | None,
        timeout_seconds: float = 8.0,
        max_retries: int = 2,
        sleep: Callable[[float], None] = time.sleep,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._api_key = api_key or ""
        self._max_retries = max(0, max_retries)
        self._sleep = sleep
        # Applies to each of connect, read, write and pool acquisition
        self._client = httpx.Client(timeout=httpx.Timeout(timeout_seconds), transport=transport)
        self._logger = logging.getLogger(__name__)

    def get_rooms(self) -> list[Room]:
        data = self._request("GET", "/api/chat/rooms")
        if not isinstance(data, list):
            raise ReservationContractError("Rooms: expected a JSON list.")
        return [_validate(Room, item, "rooms") for item in data]

    def get_working_hours(self, date: str) -> WorkingHours:
        data = self._request("GET", "/api/chat/working-hours", params={"target_date": date})
        return _validate(WorkingHours, data, "working hours")

    def check_availability(self, request: AvailabilityRequest) -> AvailabilityResult:
        data = self._request(
            "POST",
            "/api/chat/availability",
            payload=request.model_dump(),
        )
        return _validate(AvailabilityResult, data, "availability")

    def create_reservation(
        self,
        request: ReservationRequest,
        idempotency_key: str | None = None,
    ) -> CreatedReservation:
        key = idempotency_key or str(uuid.uuid4())
        data = self._request(
            "POST",
            "/api/chat/reservations",
            payload=request.model_dump(),
            idempotency_key=key,
        )
        created = _validate(CreatedReservation, data, "reservation")
        self._logger.info("Reservation created", extra={"reservation_id": created.id, "status": created.status})
        return created

    def close(self) -> None:
        self._client.close()

    def _build_headers(self, idempotency_key: str | None) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "X-Api-Key": self._api_key}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> Any:
        if not self._base_url:
            raise ReservationConfigError("RESERVATION_API_URL not configured")
        if not self._api_key:
            raise ReservationConfigError("RESERVATION_API_KEY not configured")

        url = f"{self._base_url}{path}"
        # Built once so every retry carries the same Idempotency-Key
        headers = self._build_headers(idempotency_key)

        attempt = 0
        while True:
            try:
                response = self._client.request(method, url, params=params, json=payload, headers=headers)
            except httpx.TransportError as e:
                if attempt >= self._max_retries:
                    raise ReservationNetworkError(f"Reservation API unreachable: {e}") from e
                delay = backoff_ms(attempt)
                self._logger.warning(
                    "Reservation API transport error, retrying",
                    extra={"path": path, "attempt": attempt, "delay_ms": delay, "reason": type(e).__name__},
                )
                self._sleep(delay / 1000)
                attempt += 1
                continue

            if response.is_success:
                return _parse_body(response)

            if _is_retryable(response.status_code) and attempt < self._max_retries:
                delay = backoff_ms(attempt, parse_retry_after(response.headers.get("retry-after")))
                self._logger.warning(
                    "Reservation API busy, retrying",
                    extra={"path": path, "status": response.status_code, "attempt": attempt, "delay_ms": delay},
                )
                self._sleep(delay / 1000)
                attempt += 1
                continue

            body = _error_body(response)
            self._logger.error(
                "Reservation API request failed",
                extra={"path": path, "status": response.status_code, "attempt": attempt},
            )
            raise ReservationHttpError(response.status_code, body)


def _is_retryable(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code <= 599


def _parse_body(response: httpx.Response) -> Any:
    if response.status_code == 204:
        return {}
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError as e:
            raise ReservationContractError(f"Invalid JSON from reservation API: {e}") from e
    text = response.text
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


def _error_body(response: httpx.Response) -> str:
    try:
        return json.dumps(response.json())
    except ValueError:
        return response.text


def _validate(model: type, data: Any, what: str):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ReservationContractError(f"Unexpected {what} payload: {e}") from e
