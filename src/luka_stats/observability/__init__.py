"""Structured logging and Prometheus metrics for API clients"""

from .logging import configure_logging, log_error, log_event, log_fallback, log_request
from .metrics import (
    track_cache_hit,
    track_cache_miss,
    track_error,
    track_fallback,
    track_request,
)

__all__ = [
    "configure_logging",
    "log_event",
    "log_request",
    "log_error",
    "log_fallback",
    "track_request",
    "track_cache_hit",
    "track_cache_miss",
    "track_fallback",
    "track_error",
]
