"""Free-tier Ball Don't Lie client

The free tier allows 5 requests per minute, so this client caches for only
2 minutes, checks a fixed-window limiter before every request, and serves
expired cache entries when a request is rate limited or fails.

Only the free endpoints are used: teams, players, standings and games.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import ClientConfig
from ..errors import ApiError, NotFoundError
from ..models import Game, Player, Standing, current_season_year, parse_records
from .base import BaseApiClient, tracked_operation

logger = logging.getLogger(__name__)

PLAYER_NAME = ("luka", "doncic")
PLAYERS_PER_PAGE = 100
RECENT_GAMES_PER_PAGE = 100


def _ascii_fold(name: str) -> str:
    return name.casefold().replace("č", "c").replace("ć", "c")


class FreeTierApiClient(BaseApiClient):
    """Client for the free API tier

    Args:
        config: Client configuration (default: ClientConfig.free_tier())
        **kwargs: session, cache, rate_limiter, fixtures, clock (see BaseApiClient)
    """

    def __init__(self, config: ClientConfig | None = None, **kwargs: Any):
        super().__init__(config or ClientConfig.free_tier(), **kwargs)

    # ==========================================================================
    # Players
    # ==========================================================================

    @tracked_operation
    def get_team_players(self, team_id: int | None = None) -> list[Player]:
        """Roster of a team (default: the tracked team)"""
        team_id = team_id or self.config.team_id
        try:
            payload = self.fetch_with_cache(
                "/players", {"team_ids": [team_id], "per_page": PLAYERS_PER_PAGE}
            )
            return parse_records(payload, Player)
        except ApiError as e:
            return self._fallback("get_team_players", e, self.fixtures.roster)

    @tracked_operation
    def get_player_info(self) -> Player:
        """The tracked player, found on the tracked team's roster by id or name"""
        for player in self.get_team_players():
            if player.id == self.config.player_id:
                return player
            if (_ascii_fold(player.first_name), _ascii_fold(player.last_name)) == PLAYER_NAME:
                return player

        return self._fallback(
            "get_player_info",
            NotFoundError(f"Player {self.config.player_id} not on team {self.config.team_id}"),
            self.fixtures.player_info,
        )

    # ==========================================================================
    # Standings
    # ==========================================================================

    @tracked_operation
    def get_standings(self, season: int | None = None) -> list[Standing]:
        """League standings (default: the current season)"""
        if season is None:
            season = current_season_year(self.now())
        try:
            return parse_records(self.fetch_with_cache("/standings", {"season": season}), Standing)
        except ApiError as e:
            return self._fallback("get_standings", e, self.fixtures.standings)

    @tracked_operation
    def get_team_standing(self, team_id: int | None = None) -> Standing:
        """Standing of one team (default: the tracked team)"""
        team_id = team_id or self.config.team_id
        for standing in self.get_standings():
            if standing.team.id == team_id:
                return standing

        return self._fallback(
            "get_team_standing",
            NotFoundError(f"No standing for team {team_id}"),
            self.fixtures.team_standing,
        )

    # ==========================================================================
    # Games
    # ==========================================================================

    def _fetch_games(self, limit: int = 10, **params: Any) -> list[Game]:
        """Games of the tracked team; raises ApiError instead of falling back"""
        query = {"team_ids": [self.config.team_id], "per_page": limit, **params}
        return parse_records(self.fetch_with_cache("/games", query), Game)

    @tracked_operation
    def get_games(self, limit: int = 10, **params: Any) -> list[Game]:
        """Games of the tracked team

        Args:
            limit: Page size sent as ``per_page``
            **params: Extra query parameters (start_date, end_date, dates, seasons, ...)
        """
        try:
            return self._fetch_games(limit, **params)
        except ApiError as e:
            return self._fallback("get_games", e, self.fixtures.games)

    @tracked_operation
    def get_next_game(self) -> Game | None:
        """Earliest game in the next 30 days that starts after now"""
        try:
            games = self._fetch_games(
                start_date=self.today(), end_date=self.date_string(30)
            )
        except ApiError as e:
            return self._fallback("get_next_game", e, self.fixtures.next_game)

        now = self.now()
        upcoming = sorted((g for g in games if g.date > now), key=lambda g: g.date)
        return upcoming[0] if upcoming else None

    @tracked_operation
    def get_recent_games(self, limit: int = 5) -> list[Game]:
        """Up to ``limit`` games from the last 30 days, newest first"""
        try:
            games = self._fetch_games(
                RECENT_GAMES_PER_PAGE,
                start_date=self.date_string(-30),
                end_date=self.today(),
            )
        except ApiError as e:
            return self._fallback(
                "get_recent_games",
                e,
                lambda: self.fixtures.recent_games(limit, with_stats=False),
            )

        now = self.now()
        played = sorted((g for g in games if g.date <= now), key=lambda g: g.date, reverse=True)
        return played[:limit]

    @tracked_operation
    def get_current_game(self) -> Game | None:
        """Today's game, or None when there is none or the request fails"""
        try:
            games = self._fetch_games(dates=[self.today()])
        except ApiError as e:
            logger.warning(f"Could not load today's game: {e.message}")
            return None

        today = self.now().date()
        return next((g for g in games if g.date.date() == today), None)
