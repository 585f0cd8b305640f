"""
Tests for structured JSON logging and metrics helpers.
"""

import json

import pytest

from luka_stats.observability import metrics
from luka_stats.observability import (
    log_error,
    log_event,
    log_fallback,
    log_request,
    track_cache_hit,
    track_error,
    track_fallback,
    track_request,
)


def _last_json_line(capsys) -> dict:
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    return json.loads(lines[-1])


def test_log_event_adds_timestamps(capsys):
    log_event(service="free", event="cache_hit", endpoint="/teams")

    data = _last_json_line(capsys)
    assert data["service"] == "free"
    assert data["endpoint"] == "/teams"
    assert "ts" in data
    assert data["timestamp"].endswith("+00:00")


def test_log_request(capsys):
    log_request(service="standard", endpoint="/games", status_code=200, duration_ms=12.3456)

    data = _last_json_line(capsys)
    assert data["event"] == "request"
    assert data["status_code"] == 200
    assert data["duration_ms"] == 12.35


def test_log_error(capsys):
    log_error(service="free", error="boom", error_type="NetworkError", code="TIMEOUT")

    data = _last_json_line(capsys)
    assert data["event"] == "error"
    assert data["error_type"] == "NetworkError"
    assert data["code"] == "TIMEOUT"


def test_log_fallback(capsys):
    log_fallback(service="free", operation="get_next_game", source="fixture", error_code="HTTP_503")

    data = _last_json_line(capsys)
    assert data["event"] == "fallback"
    assert data["operation"] == "get_next_game"
    assert data["source"] == "fixture"


def test_log_event_serializes_unknown_types(capsys):
    log_event(event="x", value=object())
    assert _last_json_line(capsys)["event"] == "x"


def test_json_events_can_be_switched_off(monkeypatch, capsys):
    monkeypatch.setenv("LUKA_JSON_LOGS_ENABLED", "false")

    log_event(event="x")
    log_request(service="free", endpoint="/teams", status_code=200, duration_ms=1.0)

    assert capsys.readouterr().out == ""


def test_track_helpers_accept_labels():
    track_request("free", "/games", 200, 0.1)
    track_request("free", "/games", 0, 0.2)
    track_cache_hit("free", "/games")
    track_fallback("standard", "get_next_game", "fixture")
    track_error("standard", "NetworkError")


@pytest.mark.skipif(not metrics.METRICS_ENABLED, reason="metrics disabled via LUKA_METRICS_ENABLED")
def test_metrics_exposition_includes_fallbacks():
    metrics.track_fallback("standard", "get_next_game", "fixture")

    text = metrics.generate_latest().decode()

    assert "luka_fallbacks_total" in text
    assert 'source="fixture"' in text
