"""Normalized API errors

Every failure raised by a client is an ``ApiError`` subclass, built in one
place from whatever the underlying ``requests`` failure exposes:

- NetworkError: transport failure or non-2xx response
- RateLimitError: local limiter rejection or HTTP 429
- NotFoundError: query returned no records where one was required
- ResponseValidationError: payload was not JSON or had the wrong shape
"""

from __future__ import annotations

from typing import Any

import requests

DEFAULT_MESSAGE = "API request failed"


class ApiError(Exception):
    """Base class for client errors

    Attributes:
        message: Human-readable description
        status: HTTP status (500 when the failure had no response)
        code: Short machine-readable code
        is_rate_limit: True when the failure came from rate limiting
    """

    default_status = 500
    default_code = "UNKNOWN_ERROR"
    is_rate_limit = False

    def __init__(
        self,
        message: str = DEFAULT_MESSAGE,
        status: int | None = None,
        code: str | None = None,
    ):
        self.message = message or DEFAULT_MESSAGE
        self.status = status if status is not None else self.default_status
        self.code = code or self.default_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "status": self.status,
            "code": self.code,
            "is_rate_limit": self.is_rate_limit,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status={self.status}, code={self.code!r})"

    @classmethod
    def from_request_exception(cls, exc: requests.RequestException) -> ApiError:
        """Build the matching ApiError subclass for a requests failure

        Args:
            exc: Exception raised by requests (or by ``response.json()``)

        Returns:
            RateLimitError for HTTP 429, ResponseValidationError for bad JSON,
            NetworkError otherwise

        Example:
            >>> err = ApiError.from_request_exception(requests.Timeout("read timed out"))
            >>> err.code
            'TIMEOUT'
        """
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None) if response is not None else None
        message = _response_message(response) or str(exc) or DEFAULT_MESSAGE

        if isinstance(exc, requests.exceptions.InvalidJSONError):
            return ResponseValidationError(message)

        if status == 429:
            return RateLimitError(message)

        if isinstance(exc, requests.Timeout):
            code = "TIMEOUT"
        elif isinstance(exc, requests.ConnectionError):
            code = "CONNECTION_ERROR"
        elif status:
            code = f"HTTP_{status}"
        else:
            code = "UNKNOWN_ERROR"

        return NetworkError(message, status=status, code=code)


class NetworkError(ApiError):
    """HTTP or transport failure"""

    default_code = "NETWORK_ERROR"


class RateLimitError(ApiError):
    """Request rejected by the rate limiter (local or upstream)"""

    default_status = 429
    default_code = "RATE_LIMITED"
    is_rate_limit = True


class NotFoundError(ApiError):
    """Query yielded no records"""

    default_status = 404
    default_code = "NOT_FOUND"


class ResponseValidationError(ApiError):
    """Payload did not match the expected record shape"""

    default_status = 502
    default_code = "INVALID_RESPONSE"


def _response_message(response: Any) -> str | None:
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


__all__ = [
    "ApiError",
    "NetworkError",
    "RateLimitError",
    "NotFoundError",
    "ResponseValidationError",
]
