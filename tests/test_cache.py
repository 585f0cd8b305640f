"""
Tests for the in-memory response cache.

Covers key construction, lazy TTL expiry and stale reads.
"""

from luka_stats.cache import ResponseCache, make_cache_key


def test_cache_key_is_independent_of_param_order():
    a = make_cache_key("/games", {"team_ids": [7], "per_page": 5})
    b = make_cache_key("/games", {"per_page": 5, "team_ids": [7]})
    assert a == b
    assert a.startswith("/games:")


def test_cache_key_differs_by_endpoint_and_params():
    assert make_cache_key("/games") != make_cache_key("/teams")
    assert make_cache_key("/games", {"per_page": 5}) != make_cache_key("/games", {"per_page": 10})
    assert make_cache_key("/teams") == make_cache_key("/teams", {})


class TestResponseCache:
    """Lazy TTL behaviour with an injected clock"""

    def test_get_within_ttl_returns_payload(self, clock):
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("k", {"data": [1]})

        clock.advance(119)
        assert cache.get("k") == {"data": [1]}

    def test_get_at_ttl_is_a_miss(self, clock):
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("k", {"data": [1]})

        clock.advance(120)
        assert cache.get("k") is None

    def test_expired_entry_is_kept_for_stale_reads(self, clock):
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("k", {"data": [1]})

        clock.advance(180)
        assert cache.get("k") is None
        assert cache.get_stale("k") == {"data": [1]}
        assert "k" in cache
        assert len(cache) == 1

    def test_missing_key(self, clock):
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        assert cache.get("missing") is None
        assert cache.get_stale("missing") is None

    def test_set_refreshes_timestamp(self, clock):
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("k", {"data": [1]})
        clock.advance(100)
        cache.set("k", {"data": [2]})
        clock.advance(100)

        assert cache.get("k") == {"data": [2]}

    def test_clear_one_and_all(self, clock):
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("a", {"data": []})
        cache.set("b", {"data": []})

        cache.clear("a")
        assert "a" not in cache
        assert "b" in cache

        cache.clear()
        assert len(cache) == 0

    def test_stats_counts_fresh_and_stale(self, clock):
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("old", {"data": []})
        clock.advance(150)
        cache.set("new", {"data": []})

        stats = cache.stats()
        assert stats["entries"] == 2
        assert stats["fresh_entries"] == 1
        assert stats["stale_entries"] == 1
        assert stats["ttl_seconds"] == 120
