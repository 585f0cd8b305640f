"""
JSON Structured Logging for luka_stats clients.

Emits one JSON object per line on stdout so dashboards and log aggregators
can tell live responses apart from cached, stale and fixture data.

Usage:
    from luka_stats.observability.logging import log_event, log_fallback

    log_event(service="free", event="cache_hit", endpoint="/teams")

    log_fallback(
        service="standard",
        operation="get_next_game",
        source="fixture",
        error_code="TIMEOUT",
    )
"""

import json
import logging
import os
import sys
import time
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def json_logs_enabled() -> bool:
    """JSON events are on unless LUKA_JSON_LOGS_ENABLED is set to something other than "true"."""
    return os.getenv("LUKA_JSON_LOGS_ENABLED", "true").lower() == "true"


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging the same way for every entry point.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def log_event(**kwargs: Any) -> None:
    """
    Log a structured event as JSON to stdout.

    Automatically adds ``ts`` (epoch seconds) and ``timestamp`` (ISO 8601).
    Nothing is written when LUKA_JSON_LOGS_ENABLED=false.

    Args:
        **kwargs: Arbitrary key-value pairs. Common keys:
            - service: Client tier ("standard", "free")
            - event: Event type ("request", "cache_hit", "fallback", "error")
            - endpoint: API endpoint path
            - operation: Client method name
            - source: Data source ("live", "cache", "stale_cache", "fixture")

    Example:
        >>> log_event(service="free", event="cache_hit", endpoint="/teams")
        {"service": "free", "event": "cache_hit", "endpoint": "/teams", "ts": ..., "timestamp": "..."}
    """
    if not json_logs_enabled():
        return

    kwargs.setdefault("ts", time.time())
    kwargs["timestamp"] = datetime.fromtimestamp(kwargs["ts"], tz=UTC).isoformat()

    try:
        sys.stdout.write(json.dumps(kwargs, default=str) + "\n")
        sys.stdout.flush()
    except (TypeError, ValueError, OSError) as e:
        logger.error(f"Failed to write JSON log: {e}. Data: {kwargs}")


def log_request(
    service: str,
    endpoint: str,
    status_code: int,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log an outbound API request.

    Args:
        service: Client tier
        endpoint: API endpoint path
        status_code: HTTP status (0 when no response was received)
        duration_ms: Request duration in milliseconds
        **kwargs: Additional context (params, error code, ...)
    """
    log_data = {
        "event": "request",
        "service": service,
        "endpoint": endpoint,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }
    log_data.update(kwargs)
    log_event(**log_data)


def log_error(
    service: str,
    error: str,
    error_type: str | None = None,
    **kwargs: Any,
) -> None:
    """
    Log an error with structured data.

    Args:
        service: Client tier
        error: Error message
        error_type: Error class name (NetworkError, RateLimitError, ...)
        **kwargs: Additional context (endpoint, status, code, ...)
    """
    log_data = {
        "event": "error",
        "service": service,
        "error": error,
    }

    if error_type:
        log_data["error_type"] = error_type

    log_data.update(kwargs)
    log_event(**log_data)


def log_fallback(service: str, operation: str, source: str, **kwargs: Any) -> None:
    """
    Log that a caller received degraded data instead of a live response.

    Args:
        service: Client tier
        operation: Client method that fell back
        source: What was served instead ("stale_cache" or "fixture")
        **kwargs: Additional context (error_code, endpoint, ...)
    """
    log_event(event="fallback", service=service, operation=operation, source=source, **kwargs)


__all__ = [
    "configure_logging",
    "json_logs_enabled",
    "log_event",
    "log_request",
    "log_error",
    "log_fallback",
]
