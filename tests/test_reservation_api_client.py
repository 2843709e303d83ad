"""
Tests for the booking API client: headers, retries, idempotency and body parsing.
"""

from __future__ import annotations

import json

import httpx
import pytest

from pubbot.application.dto.reservation_api import AvailabilityRequest, ReservationRequest
from pubbot.application.exceptions import (
    ReservationApiError,
    ReservationConfigError,
    ReservationContractError,
    ReservationHttpError,
    ReservationNetworkError,
)
from pubbot.infrastructure.reservations.http_client import ReservationApiClient, _parse_body

BASE_URL = "https://booking.example.com/"

RESERVATION = ReservationRequest(
    customer_name="Jane Doe",
    email="jane@example.com",
    phone="+49 123 456789",
    date="2026-10-20",
    time="19:00",
    party_size=4,
)


def _client(handler, sleeps: list[float] | None = None, max_retries: int = 2, **kwargs) -> ReservationApiClient:
    recorded = sleeps if sleeps is not None else []
    return ReservationApiClient(
        base_url=kwargs.pop("base_url", BASE_URL),
        api_key=kwargs.pop("api_key", "secret"),
        max_retries=max_retries,
        sleep=recorded.append,
        transport=httpx.MockTransport(handler),
    )


def test_missing_configuration_fails_on_first_call_not_construction():
    calls = []
    client = _client(lambda request: calls.append(request), base_url=None)
    with pytest.raises(ReservationConfigError, match="RESERVATION_API_URL"):
        client.get_rooms()

    client = _client(lambda request: calls.append(request), api_key="")
    with pytest.raises(ReservationConfigError, match="RESERVATION_API_KEY"):
        client.get_working_hours("2026-10-20")
    assert calls == []


def test_get_rooms_sends_api_key_and_strips_trailing_slash():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1, "name": "Main Bar", "total_capacity": 40}])

    rooms = _client(handler).get_rooms()

    assert rooms[0].id == "1"
    assert rooms[0].name == "Main Bar"
    assert str(seen[0].url) == "https://booking.example.com/api/chat/rooms"
    assert seen[0].headers["X-Api-Key"] == "secret"
    assert "Idempotency-Key" not in seen[0].headers


def test_working_hours_uses_target_date_query():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"open": "17:00", "close": "23:00", "slots": ["17:00", "17:30"]})

    hours = _client(handler).get_working_hours("2026-10-20")

    assert hours.slots == ["17:00", "17:30"]
    assert seen[0].url.params["target_date"] == "2026-10-20"


def test_check_availability_posts_json_payload():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={"available": False, "rooms": [], "suggestions": [{"time": "20:00", "room_name": "Snug"}]},
        )

    result = _client(handler).check_availability(
        AvailabilityRequest(date="2026-10-20", time="19:00", party_size=4)
    )

    assert seen[0] == {"date": "2026-10-20", "time": "19:00", "party_size": 4, "room_id": None}
    assert result.available is False
    assert result.suggestions[0].time == "20:00"


def test_retries_5xx_then_succeeds():
    sleeps: list[float] = []
    responses = iter([httpx.Response(503), httpx.Response(502), httpx.Response(200, json=[])])

    rooms = _client(lambda request: next(responses), sleeps=sleeps).get_rooms()

    assert rooms == []
    assert len(sleeps) == 2
    assert 0.3 <= sleeps[0] < 0.5
    assert 0.6 <= sleeps[1] < 0.8


def test_retry_after_header_overrides_backoff():
    sleeps: list[float] = []
    responses = iter([httpx.Response(429, headers={"Retry-After": "2"}), httpx.Response(200, json=[])])

    _client(lambda request: next(responses), sleeps=sleeps).get_rooms()

    assert sleeps == [2.0]


def test_retries_are_bounded_and_raise_with_last_status():
    sleeps: list[float] = []
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(500, json={"detail": "boom"})

    with pytest.raises(ReservationHttpError) as exc_info:
        _client(handler, sleeps=sleeps).get_rooms()

    assert len(attempts) == 3
    assert len(sleeps) == 2
    assert exc_info.value.status_code == 500
    assert "boom" in exc_info.value.body


def test_non_retryable_4xx_raises_immediately_with_body():
    sleeps: list[float] = []
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(422, json={"detail": "party_size too large"})

    with pytest.raises(ReservationHttpError) as exc_info:
        _client(handler, sleeps=sleeps).create_reservation(RESERVATION, idempotency_key="k1")

    assert len(attempts) == 1
    assert sleeps == []
    assert exc_info.value.status_code == 422
    assert "party_size too large" in str(exc_info.value)


def test_timeouts_are_retried_then_surface_as_network_error():
    sleeps: list[float] = []
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ReservationNetworkError):
        _client(handler, sleeps=sleeps, max_retries=1).get_rooms()

    assert len(attempts) == 2
    assert len(sleeps) == 1


def test_connection_error_then_success():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json=[])

    assert _client(handler).get_rooms() == []
    assert len(attempts) == 2


def test_idempotency_key_is_identical_across_retries():
    keys: list[str] = []
    responses = iter(
        [
            httpx.Response(503),
            httpx.Response(201, json={"id": "res-1", "status": "confirmed", "tables": []}),
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers["Idempotency-Key"])
        return next(responses)

    created = _client(handler).create_reservation(RESERVATION, idempotency_key="booking-123")

    assert created.id == "res-1"
    assert keys == ["booking-123", "booking-123"]


def test_create_reservation_mints_key_when_missing():
    keys: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        keys.append(request.headers.get("Idempotency-Key", ""))
        return httpx.Response(200, json={"id": "res-2", "status": "confirmed"})

    _client(handler).create_reservation(RESERVATION)

    assert len(keys[0]) == 36


def test_204_yields_empty_result_object():
    hours = _client(lambda request: httpx.Response(204)).get_working_hours("2026-10-20")
    assert hours.slots == []


def test_non_json_body_is_wrapped_not_dropped():
    response = httpx.Response(200, text="maintenance", headers={"content-type": "text/plain"})
    assert _parse_body(response) == {"raw": "maintenance"}


def test_non_json_rooms_body_is_a_contract_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="maintenance", headers={"content-type": "text/plain"})

    with pytest.raises(ReservationContractError) as exc_info:
        _client(handler).get_rooms()
    assert isinstance(exc_info.value, ReservationApiError)


def test_json_body_without_json_content_type_is_parsed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text='{"id": "res-3", "status": "pending"}', headers={"content-type": "text/plain"})

    created = _client(handler).create_reservation(RESERVATION, idempotency_key="k")
    assert created.id == "res-3"
    assert created.tables == []


def test_wrong_payload_shape_raises_contract_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "confirmed"})

    with pytest.raises(ReservationContractError):
        _client(handler).create_reservation(RESERVATION, idempotency_key="k")


def test_timeout_applies_to_every_request_phase():
    client = ReservationApiClient(base_url=BASE_URL, api_key="secret", timeout_seconds=8.0)
    timeout = client._client.timeout
    assert (timeout.connect, timeout.read, timeout.write, timeout.pool) == (8.0, 8.0, 8.0, 8.0)
    client.close()
