"""
Pytest configuration and shared fixtures for the luka_stats client tests.

This module provides reusable fixtures that:
1. Pin time to a controllable fake clock
2. Replace HTTP with a mocked requests session
3. Build standard and free-tier clients with deterministic fixture data

Usage:
    def test_something(free_client, session, make_response):
        session.get.return_value = make_response({"data": []})
        assert free_client.get_teams() == []
"""

import random
from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from luka_stats import ClientConfig, FixtureProvider, FreeTierApiClient, StandardApiClient

# Mid-season evening: 2025-01-15 20:00 UTC (2024-25 season)
NOW = datetime(2025, 1, 15, 20, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock returning a settable epoch time"""

    def __init__(self, start: float):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Time and HTTP Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW.timestamp())


@pytest.fixture
def make_response():
    """
    Factory for mocked ``requests.Response`` objects.

    Example:
        resp = make_response({"data": []})
        resp = make_response({"message": "Too Many Requests"}, status=429)
    """

    def _make(payload: Any, status: int = 200) -> Mock:
        response = Mock()
        response.status_code = status
        response.json.return_value = payload
        if status >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(
                f"{status} Error", response=response
            )
        else:
            response.raise_for_status.return_value = None
        return response

    return _make


@pytest.fixture
def session() -> requests.Session:
    """Real session (real headers) whose ``get`` is a Mock"""
    s = requests.Session()
    s.get = Mock()
    return s


@pytest.fixture
def route(session, make_response):
    """
    Dispatch mocked GETs by endpoint.

    The handler receives ``(endpoint, params)`` and returns a payload dict,
    a mocked response, or raises a requests exception.

    Example:
        route(lambda endpoint, params: {"data": []})
    """

    def _route(handler):
        def side_effect(url, params=None, timeout=None):
            endpoint = "/" + url.split("/v1/", 1)[1]
            result = handler(endpoint, params or {})
            return make_response(result) if isinstance(result, dict) else result

        session.get.side_effect = side_effect
        return session.get

    return _route


@pytest.fixture
def fixtures_for(clock):
    def _build(team_id: int) -> FixtureProvider:
        return FixtureProvider.for_team(team_id, rng=random.Random(42), clock=clock)

    return _build


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def standard_client(session, clock, fixtures_for) -> StandardApiClient:
    config = ClientConfig.standard()
    return StandardApiClient(
        config, session=session, clock=clock, fixtures=fixtures_for(config.team_id)
    )


@pytest.fixture
def free_client(session, clock, fixtures_for) -> FreeTierApiClient:
    config = ClientConfig.free_tier(api_key="test-key")
    return FreeTierApiClient(
        config, session=session, clock=clock, fixtures=fixtures_for(config.team_id)
    )


# ============================================================================
# Sample Payloads
# ============================================================================


def team_payload(
    team_id: int = 7, abbreviation: str = "DAL", name: str = "Dallas Mavericks"
) -> dict:
    return {
        "id": team_id,
        "abbreviation": abbreviation,
        "city": name.rsplit(" ", 1)[0],
        "conference": "West",
        "division": "Southwest",
        "full_name": name,
        "name": name.rsplit(" ", 1)[-1],
    }


def game_payload(
    game_id: int,
    date: str,
    home: dict | None = None,
    visitor: dict | None = None,
    home_score: int = 0,
    visitor_score: int = 0,
    status: str = "Final",
) -> dict:
    return {
        "id": game_id,
        "date": date,
        "home_team": home or team_payload(),
        "visitor_team": visitor or team_payload(10, "GSW", "Golden State Warriors"),
        "home_team_score": home_score,
        "visitor_team_score": visitor_score,
        "period": 4,
        "postseason": False,
        "season": 2024,
        "status": status,
        "time": "",
    }


def stat_payload(
    game_id: int,
    date: str,
    pts: int = 30,
    reb: int = 9,
    ast: int = 8,
    team_id: int = 7,
    home_team_id: int = 7,
    visitor_team_id: int = 10,
    home_score: int = 110,
    visitor_score: int = 100,
    minutes: str = "36:00",
    fgm: int = 11,
    fga: int = 22,
) -> dict:
    return {
        "id": game_id * 10,
        "pts": pts,
        "reb": reb,
        "ast": ast,
        "fgm": fgm,
        "fga": fga,
        "fg_pct": round(fgm / fga, 3) if fga else 0.0,
        "min": minutes,
        "player": {"id": 77, "first_name": "Luka", "last_name": "Doncic"},
        "team": team_payload(team_id, "DAL" if team_id == 7 else f"T{team_id}", f"Team {team_id}"),
        "game": {
            "id": game_id,
            "date": date,
            "home_team_id": home_team_id,
            "visitor_team_id": visitor_team_id,
            "home_team_score": home_score,
            "visitor_team_score": visitor_score,
            "season": 2024,
            "postseason": False,
            "status": "Final",
        },
    }


@pytest.fixture
def sample_season_averages() -> dict:
    return {
        "data": [
            {
                "player_id": 77,
                "season": 2024,
                "games_played": 45,
                "gp": 45,
                "pts": 32.8,
                "reb": 8.9,
                "ast": 9.1,
                "fg_pct": 0.487,
                "min": "36:10",
            }
        ]
    }


@pytest.fixture
def sample_previous_averages() -> dict:
    return {
        "data": [
            {
                "player_id": 77,
                "season": 2023,
                "pts": 30.7,
                "reb": 8.6,
                "ast": 8.3,
                "fg_pct": 0.475,
            }
        ]
    }


def pytest_configure(config):
    """
    Register custom pytest markers.

    Markers:
        fallback: Test exercises stale-cache or fixture fallback
        integration: Test calls the real API (needs network)
    """
    config.addinivalue_line("markers", "fallback: test exercises stale-cache or fixture fallback")
    config.addinivalue_line("markers", "integration: test calls the real Ball Don't Lie API")
