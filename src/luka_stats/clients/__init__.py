"""Ball Don't Lie API clients

Example:
    from luka_stats.clients import create_client

    client = create_client("free")
    game = client.get_next_game()
"""

from typing import Any

from ..config import ClientConfig, Tier
from .base import BaseApiClient, DataSource, encode_params
from .free_tier import FreeTierApiClient
from .standard import StandardApiClient


def create_client(tier: Tier = "standard", **kwargs: Any) -> BaseApiClient:
    """Build a client for a tier with configuration from the environment

    Args:
        tier: "standard" or "free"
        **kwargs: session, cache, rate_limiter, fixtures, clock

    Returns:
        StandardApiClient or FreeTierApiClient
    """
    config = ClientConfig.from_env(tier)
    if tier == "free":
        return FreeTierApiClient(config, **kwargs)
    return StandardApiClient(config, **kwargs)


__all__ = [
    "BaseApiClient",
    "DataSource",
    "FreeTierApiClient",
    "StandardApiClient",
    "create_client",
    "encode_params",
]
