"""
Prometheus Metrics for luka_stats clients.

Metrics Exposed:
    - luka_api_requests_total: Counter of outbound requests by tier, endpoint and status
    - luka_api_request_duration_seconds: Histogram of outbound request duration
    - luka_cache_hits_total: Counter of fresh cache hits by tier and endpoint
    - luka_cache_misses_total: Counter of cache misses by tier and endpoint
    - luka_fallbacks_total: Counter of degraded responses by tier, operation and source
    - luka_errors_total: Counter of errors by tier and error type

Set LUKA_METRICS_ENABLED=false to replace every metric with a no-op.

Usage:
    from luka_stats.observability.metrics import track_cache_hit, track_fallback

    track_cache_hit("free", "/teams")
    track_fallback("standard", "get_next_game", "fixture")
"""

import logging
import os
from typing import Any

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

logger = logging.getLogger(__name__)

METRICS_ENABLED = os.getenv("LUKA_METRICS_ENABLED", "true").lower() == "true"


class NoOpMetric:
    """No-op metric that does nothing."""

    def labels(self, **kwargs: Any) -> "NoOpMetric":
        return self

    def inc(self, amount: float = 1) -> None:
        pass

    def observe(self, amount: float) -> None:
        pass


# ============================================================================
# Metric Definitions
# ============================================================================

if METRICS_ENABLED:
    REQUEST_TOTAL = Counter(
        "luka_api_requests_total",
        "Total outbound API requests",
        ["tier", "endpoint", "status"],
    )

    REQUEST_DURATION = Histogram(
        "luka_api_request_duration_seconds",
        "Outbound API request duration in seconds",
        ["tier", "endpoint"],
        buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0],  # seconds
    )

    CACHE_HITS = Counter(
        "luka_cache_hits_total", "Total number of fresh cache hits", ["tier", "endpoint"]
    )

    CACHE_MISSES = Counter(
        "luka_cache_misses_total", "Total number of cache misses", ["tier", "endpoint"]
    )

    FALLBACKS = Counter(
        "luka_fallbacks_total",
        "Responses served from stale cache or fixtures",
        ["tier", "operation", "source"],
    )

    ERROR_TOTAL = Counter("luka_errors_total", "Total errors", ["tier", "error_type"])

else:
    REQUEST_TOTAL = NoOpMetric()  # type: ignore[assignment]
    REQUEST_DURATION = NoOpMetric()  # type: ignore[assignment]
    CACHE_HITS = NoOpMetric()  # type: ignore[assignment]
    CACHE_MISSES = NoOpMetric()  # type: ignore[assignment]
    FALLBACKS = NoOpMetric()  # type: ignore[assignment]
    ERROR_TOTAL = NoOpMetric()  # type: ignore[assignment]

    logger.info("Prometheus metrics disabled (LUKA_METRICS_ENABLED=false)")


# ============================================================================
# Convenience Functions
# ============================================================================


def track_request(tier: str, endpoint: str, status: int, duration_seconds: float) -> None:
    """
    Track an outbound API request.

    Example:
        >>> track_request("free", "/games", 200, 0.125)
    """
    REQUEST_TOTAL.labels(tier=tier, endpoint=endpoint, status=str(status)).inc()
    REQUEST_DURATION.labels(tier=tier, endpoint=endpoint).observe(duration_seconds)


def track_cache_hit(tier: str, endpoint: str) -> None:
    CACHE_HITS.labels(tier=tier, endpoint=endpoint).inc()


def track_cache_miss(tier: str, endpoint: str) -> None:
    CACHE_MISSES.labels(tier=tier, endpoint=endpoint).inc()


def track_fallback(tier: str, operation: str, source: str) -> None:
    """
    Track a degraded response.

    Args:
        tier: Client tier
        operation: Client method or endpoint that fell back
        source: "stale_cache" or "fixture"
    """
    FALLBACKS.labels(tier=tier, operation=operation, source=source).inc()


def track_error(tier: str, error_type: str) -> None:
    ERROR_TOTAL.labels(tier=tier, error_type=error_type).inc()


__all__ = [
    "REQUEST_TOTAL",
    "REQUEST_DURATION",
    "CACHE_HITS",
    "CACHE_MISSES",
    "FALLBACKS",
    "ERROR_TOTAL",
    "track_request",
    "track_cache_hit",
    "track_cache_miss",
    "track_fallback",
    "track_error",
    "generate_latest",
    "CONTENT_TYPE_LATEST",
    "METRICS_ENABLED",
]
