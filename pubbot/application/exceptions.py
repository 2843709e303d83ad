
class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass


class ReservationApiError(RuntimeError):
    """Base class for every failure talking to the booking system."""
    pass


class ReservationConfigError(ReservationApiError):
    """Raised on first use when the booking API base URL or key is missing."""
    pass


class ReservationHttpError(ReservationApiError):
    """Non-2xx answer from the booking API (after retries, when retryable)."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Reservation API error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class ReservationNetworkError(ReservationApiError):
    """Timeouts and connection failures that outlived the retry budget."""
    pass


class ReservationContractError(ReservationApiError):
    """Booking API answered with a payload of the wrong shape."""
    pass
