"""Base client with caching, rate limiting and fallback handling

Every query follows the same linear cascade:

1. Build a cache key from endpoint + params
2. Fresh cache hit -> return it
3. Miss -> rate-limit check (when configured) -> HTTP GET
4. Failure -> stale cache entry (when ``stale_on_error``) -> otherwise the
   domain method substitutes fixture data (when ``fallback_enabled``)
5. Success -> validate envelope, store, return

Each public operation records where its data came from (``last_source``) so
callers and dashboards can tell live data from degraded data.
"""

from __future__ import annotations

import functools
import logging
import time
from collections import Counter
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, TypeVar

import requests

from ..cache import ResponseCache, make_cache_key
from ..config import ClientConfig
from ..errors import ApiError, NetworkError, NotFoundError, RateLimitError
from ..fixtures import FixtureProvider
from ..models import Team, parse_records, parse_response
from ..observability.logging import log_error, log_fallback, log_request
from ..observability.metrics import (
    track_cache_hit,
    track_cache_miss,
    track_error,
    track_fallback,
    track_request,
)
from ..utils.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DataSource(str, Enum):
    """Where a response came from, from best to worst"""

    LIVE = "live"
    CACHE = "cache"
    STALE_CACHE = "stale_cache"
    FIXTURE = "fixture"


_SEVERITY = {source: rank for rank, source in enumerate(DataSource)}


def encode_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop None values and send list params in bracket form (``team_ids[]=7``)"""
    encoded: dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            encoded[f"{key}[]"] = list(value)
        else:
            encoded[key] = value
    return encoded


def tracked_operation(fn: Callable[..., T]) -> Callable[..., T]:
    """Decorator for public client operations

    Resets ``last_source`` when an outermost operation starts, so after the
    call it holds the worst source any nested fetch used.
    """

    @functools.wraps(fn)
    def wrapper(self: BaseApiClient, *args: Any, **kwargs: Any) -> T:
        if self._depth == 0:
            self.last_source = None
        self._depth += 1
        try:
            return fn(self, *args, **kwargs)
        finally:
            self._depth -= 1

    return wrapper


class BaseApiClient:
    """Shared request, cache and fallback machinery

    Args:
        config: Client configuration (tier presets in ClientConfig)
        session: requests.Session to send through (default: new session)
        cache: Response cache (default: ResponseCache with config TTL)
        rate_limiter: Limiter (default: built from config.rate_limit_calls, or none)
        fixtures: Fallback data provider (default: FixtureProvider for config.team_id)
        clock: Returns the current time in seconds, shared with cache and limiter
    """

    def __init__(
        self,
        config: ClientConfig,
        session: requests.Session | None = None,
        cache: ResponseCache | None = None,
        rate_limiter: FixedWindowRateLimiter | None = None,
        fixtures: FixtureProvider | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.clock = clock
        if cache is None:
            cache = ResponseCache(config.cache_ttl_seconds, clock=clock)
        self.cache = cache

        if rate_limiter is None and config.rate_limit_calls:
            rate_limiter = FixedWindowRateLimiter(
                max_calls=config.rate_limit_calls,
                window_seconds=config.rate_limit_window_seconds,
                clock=clock,
            )
        self.rate_limiter = rate_limiter

        self.fixtures = fixtures or FixtureProvider.for_team(
            config.team_id, config.player_id, clock=clock
        )

        self.session = session or requests.Session()
        self.session.headers.update(
            {"Content-Type": "application/json", "Accept": "application/json"}
        )
        if config.api_key:
            self.session.headers.update({"Authorization": config.api_key})

        self.last_source: DataSource | None = None
        self.source_counts: Counter[str] = Counter()
        self._depth = 0

    @property
    def tier(self) -> str:
        return self.config.tier

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> BaseApiClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ==========================================================================
    # Time helpers
    # ==========================================================================

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.clock(), tz=UTC)

    def today(self) -> str:
        return self.now().date().isoformat()

    def date_string(self, days_from_now: int) -> str:
        """YYYY-MM-DD for a day relative to today (negative = past)"""
        return (self.now() + timedelta(days=days_from_now)).date().isoformat()

    # ==========================================================================
    # Transport
    # ==========================================================================

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request to the API

        Args:
            endpoint: API endpoint (e.g., "/games", "/season_averages")
            params: Query parameters (lists are sent in bracket form)

        Returns:
            Decoded JSON body

        Raises:
            RateLimitError: If the local limiter rejects the request or the API returns 429
            NetworkError: If the request fails or returns a non-2xx status
            ResponseValidationError: If the body is not JSON
        """
        if self.rate_limiter is not None and not self.rate_limiter.acquire():
            error = RateLimitError(
                f"Rate limit exceeded: {self.rate_limiter.max_calls} requests per "
                f"{self.rate_limiter.window_seconds:g}s"
            )
            track_error(self.tier, type(error).__name__)
            log_error(
                service=self.tier,
                error=error.message,
                error_type=type(error).__name__,
                endpoint=endpoint,
            )
            raise error

        url = f"{self.config.base_url.rstrip('/')}{endpoint}"
        start = time.perf_counter()
        status = 0
        try:
            response = self.session.get(
                url, params=encode_params(params), timeout=self.config.timeout_seconds
            )
            status = response.status_code
            response.raise_for_status()
            data = response.json()

        except requests.RequestException as e:
            error = ApiError.from_request_exception(e)
            logger.error(f"{self.tier} API request failed: {url} params={params} - {error!r}")
            track_error(self.tier, type(error).__name__)
            log_error(
                service=self.tier,
                error=error.message,
                error_type=type(error).__name__,
                endpoint=endpoint,
                status=error.status,
                code=error.code,
            )
            raise error from e

        finally:
            track_request(self.tier, endpoint, status, time.perf_counter() - start)

        log_request(
            service=self.tier,
            endpoint=endpoint,
            status_code=status,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return data

    # ==========================================================================
    # Cache cascade
    # ==========================================================================

    def _record_source(self, source: DataSource) -> None:
        self.source_counts[source.value] += 1
        if self.last_source is None or _SEVERITY[source] > _SEVERITY[self.last_source]:
            self.last_source = source

    def fetch_with_cache(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        cache_key: str | None = None,
    ) -> dict[str, Any]:
        """Fetch an endpoint through the cache

        Args:
            endpoint: API endpoint
            params: Query parameters
            cache_key: Explicit cache key (default: endpoint + serialized params)

        Returns:
            Raw ``{data, meta}`` payload

        Raises:
            ApiError: If the request fails and no stale entry may be served
        """
        key = cache_key or make_cache_key(endpoint, params)

        cached = self.cache.get(key)
        if cached is not None:
            track_cache_hit(self.tier, endpoint)
            self._record_source(DataSource.CACHE)
            return cached

        track_cache_miss(self.tier, endpoint)
        try:
            data = self._get(endpoint, params)
            parse_response(data)
        except (NetworkError, RateLimitError) as e:
            if self.config.stale_on_error:
                stale = self.cache.get_stale(key)
                if stale is not None:
                    logger.warning(f"{e.message}; returning stale cache for {key}")
                    track_fallback(self.tier, endpoint, DataSource.STALE_CACHE.value)
                    log_fallback(
                        service=self.tier,
                        operation=endpoint,
                        source=DataSource.STALE_CACHE.value,
                        error_code=e.code,
                    )
                    self._record_source(DataSource.STALE_CACHE)
                    return stale
            raise

        self.cache.set(key, data)
        self._record_source(DataSource.LIVE)
        return data

    def fetch_all_pages(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every page of a collection endpoint

        Follows ``meta.next_cursor`` or ``meta.next_page`` up to ``max_pages``
        (default: config.max_pages). Each page is cached separately.

        Returns:
            Concatenated ``data`` items of all pages
        """
        items: list[dict[str, Any]] = []
        page_params = dict(params or {})
        max_pages = max_pages or self.config.max_pages

        for _ in range(max_pages):
            page = parse_response(self.fetch_with_cache(endpoint, page_params))
            items.extend(page.data)

            meta = page.meta
            if meta is None:
                break
            if meta.next_cursor is not None:
                page_params = {**page_params, "cursor": meta.next_cursor}
            elif meta.next_page is not None:
                page_params = {**page_params, "page": meta.next_page}
            else:
                break
        else:
            logger.info(f"Stopped paging {endpoint} after {max_pages} pages")

        return items

    def _fallback(self, operation: str, error: ApiError, fixture: Callable[[], T]) -> T:
        """Substitute fixture data for a failed operation

        Raises:
            ApiError: The original error, when fallback is disabled
        """
        if not self.config.fallback_enabled:
            raise error

        logger.warning(f"{operation} failed ({error.code}: {error.message}); using fixture data")
        track_fallback(self.tier, operation, DataSource.FIXTURE.value)
        log_fallback(
            service=self.tier,
            operation=operation,
            source=DataSource.FIXTURE.value,
            error_code=error.code,
            status=error.status,
        )
        self._record_source(DataSource.FIXTURE)
        return fixture()

    def clear_cache(self, key: str | None = None) -> None:
        self.cache.clear(key)

    def stats(self) -> dict[str, Any]:
        """Cache, limiter and data-source counters for this client"""
        return {
            "tier": self.tier,
            "cache": self.cache.stats(),
            "sources": dict(self.source_counts),
            "last_source": self.last_source.value if self.last_source else None,
            "rate_limit_remaining": (
                self.rate_limiter.remaining if self.rate_limiter is not None else None
            ),
        }

    # ==========================================================================
    # Teams (both tiers)
    # ==========================================================================

    @tracked_operation
    def get_teams(self) -> list[Team]:
        """All NBA teams"""
        try:
            return parse_records(self.fetch_with_cache("/teams"), Team)
        except ApiError as e:
            return self._fallback("get_teams", e, self.fixtures.teams)

    @tracked_operation
    def get_team(self, team_id: int | None = None) -> Team:
        """One team (default: the tracked team)"""
        team_id = team_id or self.config.team_id
        for team in self.get_teams():
            if team.id == team_id:
                return team
        return self._fallback(
            "get_team", NotFoundError(f"Team {team_id} not found"), self.fixtures.team_info
        )
