"""In-memory response cache with lazy TTL expiry

Entries are keyed by endpoint + serialized query parameters. An entry is
fresh while ``now - stored_at < ttl``; expired entries stay in the map so the
free-tier client can still serve them as a degraded fallback.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    key: str
    payload: Any
    stored_at: float


def make_cache_key(endpoint: str, params: dict[str, Any] | None = None) -> str:
    """Build a cache key from an endpoint path and its query parameters

    Example:
        >>> make_cache_key("/games", {"team_ids": [6], "per_page": 5})
        '/games:{"per_page": 5, "team_ids": [6]}'
    """
    return f"{endpoint}:{json.dumps(params or {}, sort_keys=True, default=str)}"


class ResponseCache:
    """Unbounded TTL cache held in process memory

    Args:
        ttl_seconds: Time-to-live for entries
        clock: Returns the current time in seconds (default: time.time)
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.stored_at < self.ttl

    def get(self, key: str) -> Any | None:
        """Return the payload for key if it exists and has not expired"""
        entry = self._entries.get(key)
        if entry is not None and self.is_fresh(entry):
            logger.debug(f"Cache hit: {key}")
            return entry.payload

        logger.debug(f"Cache miss: {key}")
        return None

    def get_stale(self, key: str) -> Any | None:
        """Return the payload for key regardless of age"""
        entry = self._entries.get(key)
        return entry.payload if entry is not None else None

    def set(self, key: str, payload: Any) -> None:
        self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())

    def clear(self, key: str | None = None) -> None:
        """Remove one entry, or every entry when key is None"""
        if key is None:
            self._entries.clear()
            logger.info("Cache cleared")
        else:
            self._entries.pop(key, None)

    def stats(self) -> dict[str, Any]:
        fresh = sum(1 for entry in self._entries.values() if self.is_fresh(entry))
        return {
            "entries": len(self._entries),
            "fresh_entries": fresh,
            "stale_entries": len(self._entries) - fresh,
            "ttl_seconds": self.ttl,
        }

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
