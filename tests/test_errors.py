"""
Tests for error normalization from requests failures.
"""

from unittest.mock import Mock

import pytest
import requests

from luka_stats.errors import (
    ApiError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ResponseValidationError,
)


def _http_error(status: int, body=None) -> requests.HTTPError:
    response = Mock()
    response.status_code = status
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return requests.HTTPError(f"{status} Error", response=response)


def test_timeout_maps_to_network_error():
    err = ApiError.from_request_exception(requests.Timeout("read timed out"))
    assert isinstance(err, NetworkError)
    assert err.code == "TIMEOUT"
    assert err.status == 500
    assert err.message == "read timed out"
    assert not err.is_rate_limit


def test_connection_error_maps_to_network_error():
    err = ApiError.from_request_exception(requests.ConnectionError("refused"))
    assert isinstance(err, NetworkError)
    assert err.code == "CONNECTION_ERROR"


def test_http_status_is_preserved():
    err = ApiError.from_request_exception(_http_error(503))
    assert isinstance(err, NetworkError)
    assert err.status == 503
    assert err.code == "HTTP_503"


def test_response_body_message_is_used():
    err = ApiError.from_request_exception(_http_error(401, {"message": "Unauthorized key"}))
    assert err.message == "Unauthorized key"
    assert err.status == 401


def test_http_429_maps_to_rate_limit_error():
    err = ApiError.from_request_exception(_http_error(429, {"message": "Too Many Requests"}))
    assert isinstance(err, RateLimitError)
    assert err.is_rate_limit
    assert err.status == 429
    assert err.code == "RATE_LIMITED"


def test_invalid_json_maps_to_validation_error():
    err = ApiError.from_request_exception(requests.exceptions.InvalidJSONError("bad json"))
    assert isinstance(err, ResponseValidationError)
    assert err.status == 502


def test_empty_message_gets_default():
    err = ApiError.from_request_exception(requests.RequestException())
    assert err.message == "API request failed"
    assert err.code == "UNKNOWN_ERROR"


@pytest.mark.parametrize(
    "cls, status, code",
    [
        (NetworkError, 500, "NETWORK_ERROR"),
        (RateLimitError, 429, "RATE_LIMITED"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ResponseValidationError, 502, "INVALID_RESPONSE"),
    ],
)
def test_subclass_defaults(cls, status, code):
    err = cls("boom")
    assert isinstance(err, ApiError)
    assert err.status == status
    assert err.code == code
    assert err.to_dict() == {
        "message": "boom",
        "status": status,
        "code": code,
        "is_rate_limit": cls is RateLimitError,
    }
    assert cls.__name__ in repr(err)
