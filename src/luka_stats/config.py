"""
Configuration management for luka_stats API clients.

Provides one configuration model shared by the standard and free-tier
clients, with presets for each tier and environment-variable loading.
"""

import os
from typing import Literal

from pydantic import BaseModel, Field

STANDARD_BASE_URL = "https://www.balldontlie.io/api/v1"
FREE_TIER_BASE_URL = "https://api.balldontlie.io/v1"

LUKA_PLAYER_ID = 77
MAVERICKS_TEAM_ID = 7
LAKERS_TEAM_ID = 14

Tier = Literal["standard", "free"]


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


class ClientConfig(BaseModel):
    """Configuration for a Ball Don't Lie client."""

    tier: Tier = Field(default="standard", description="API tier (standard or free)")

    base_url: str = Field(default=STANDARD_BASE_URL, description="API base URL")

    cache_ttl_seconds: float = Field(
        default=900, description="Response cache TTL in seconds", gt=0
    )

    timeout_seconds: float = Field(default=10, description="HTTP request timeout", gt=0)

    api_key: str | None = Field(
        default=None, description="Value sent as the Authorization header (free tier)"
    )

    rate_limit_calls: int | None = Field(
        default=None, description="Requests allowed per window (None = unlimited)", ge=1
    )

    rate_limit_window_seconds: float = Field(
        default=60, description="Fixed rate-limit window length in seconds", gt=0
    )

    stale_on_error: bool = Field(
        default=False, description="Serve expired cache entries when a request fails"
    )

    fallback_enabled: bool = Field(
        default=True, description="Substitute fixture data when live data is unavailable"
    )

    player_id: int = Field(default=LUKA_PLAYER_ID, description="Tracked player id")

    team_id: int = Field(default=MAVERICKS_TEAM_ID, description="Tracked team id")

    max_pages: int = Field(
        default=5, description="Maximum pages followed for paginated endpoints", ge=1
    )

    @classmethod
    def standard(cls, **overrides) -> "ClientConfig":
        """
        Preset for the general-availability API.

        15 minute cache, 10 second timeout, no rate limiting.
        """
        values = {
            "tier": "standard",
            "base_url": STANDARD_BASE_URL,
            "cache_ttl_seconds": 15 * 60,
            "timeout_seconds": 10,
            "team_id": MAVERICKS_TEAM_ID,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def free_tier(cls, **overrides) -> "ClientConfig":
        """
        Preset for the free-tier API.

        2 minute cache, 15 second timeout, 5 requests per minute, and
        stale-cache fallback when a request fails.
        """
        values = {
            "tier": "free",
            "base_url": FREE_TIER_BASE_URL,
            "cache_ttl_seconds": 2 * 60,
            "timeout_seconds": 15,
            "rate_limit_calls": 5,
            "rate_limit_window_seconds": 60,
            "stale_on_error": True,
            "team_id": LAKERS_TEAM_ID,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_env(cls, tier: Tier = "standard") -> "ClientConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            LUKA_STANDARD_BASE_URL: Standard API base URL
            LUKA_FREE_BASE_URL: Free-tier API base URL
            BALLDONTLIE_API_KEY: API key (free tier only)
            LUKA_CACHE_TTL_SECONDS: Cache TTL override
            LUKA_REQUEST_TIMEOUT: Request timeout override
            LUKA_FALLBACK_ENABLED: Substitute fixture data (default: true)
            LUKA_MAX_PAGES: Pagination cap (default: 5)

        Args:
            tier: "standard" or "free"

        Returns:
            ClientConfig instance
        """
        base = cls.free_tier() if tier == "free" else cls.standard()
        overrides: dict = {
            "fallback_enabled": _env_bool("LUKA_FALLBACK_ENABLED", True),
            "max_pages": int(os.getenv("LUKA_MAX_PAGES", str(base.max_pages))),
        }

        if tier == "free":
            overrides["base_url"] = os.getenv("LUKA_FREE_BASE_URL", FREE_TIER_BASE_URL)
            overrides["api_key"] = os.getenv("BALLDONTLIE_API_KEY") or None
        else:
            overrides["base_url"] = os.getenv("LUKA_STANDARD_BASE_URL", STANDARD_BASE_URL)

        ttl = os.getenv("LUKA_CACHE_TTL_SECONDS")
        if ttl:
            overrides["cache_ttl_seconds"] = float(ttl)

        timeout = os.getenv("LUKA_REQUEST_TIMEOUT")
        if timeout:
            overrides["timeout_seconds"] = float(timeout)

        return cls(**{**base.model_dump(), **overrides})


__all__ = [
    "ClientConfig",
    "Tier",
    "STANDARD_BASE_URL",
    "FREE_TIER_BASE_URL",
    "LUKA_PLAYER_ID",
    "MAVERICKS_TEAM_ID",
    "LAKERS_TEAM_ID",
]
