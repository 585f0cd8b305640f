"""
luka_stats: Luka Doncic stats from the Ball Don't Lie API

Two clients share one cache/fallback pipeline:

- StandardApiClient: 15 minute cache, no rate limit, season averages,
  per-game and live stats, and season splits
- FreeTierApiClient: 2 minute cache, 5 requests per minute, stale-cache
  fallback, teams/players/standings/games

Each client is constructed explicitly with its own cache, limiter and
fixture provider; nothing is shared at module level.
"""

__version__ = "0.1.0"

from .cache import ResponseCache, make_cache_key
from .clients import (
    BaseApiClient,
    DataSource,
    FreeTierApiClient,
    StandardApiClient,
    create_client,
)
from .config import ClientConfig
from .errors import ApiError, NetworkError, NotFoundError, RateLimitError, ResponseValidationError
from .fixtures import FixtureProvider
from .models import is_triple_double, season_deltas
from .utils import FixedWindowRateLimiter

__all__ = [
    "__version__",
    "ApiError",
    "BaseApiClient",
    "ClientConfig",
    "DataSource",
    "FixedWindowRateLimiter",
    "FixtureProvider",
    "FreeTierApiClient",
    "NetworkError",
    "NotFoundError",
    "RateLimitError",
    "ResponseCache",
    "ResponseValidationError",
    "StandardApiClient",
    "create_client",
    "is_triple_double",
    "make_cache_key",
    "season_deltas",
]
