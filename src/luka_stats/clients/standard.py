"""Standard-tier Ball Don't Lie client

Unlimited request budget and a 15 minute cache. Serves season averages,
schedule, per-game and live stats, and season splits for the tracked player.

Example:
    client = StandardApiClient()
    stats = client.get_current_season_stats()
    print(stats.pts, stats.trend("pts"), client.last_source)
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import ClientConfig
from ..errors import ApiError, NotFoundError
from ..models import (
    Game,
    HomeAwayStats,
    LiveGameStats,
    MonthlyStats,
    OpponentStats,
    PlayerGameStats,
    RecentGame,
    SeasonStats,
    available_seasons,
    current_season_year,
    is_triple_double,
    parse_record,
    parse_records,
    season_deltas,
    season_label,
    season_year,
)
from ..splits import home_away_splits, monthly_splits, opponent_splits
from .base import BaseApiClient, tracked_operation

logger = logging.getLogger(__name__)

GAMES_PER_PAGE = 100


class StandardApiClient(BaseApiClient):
    """Client for the standard API tier

    Args:
        config: Client configuration (default: ClientConfig.standard())
        **kwargs: session, cache, rate_limiter, fixtures, clock (see BaseApiClient)
    """

    def __init__(self, config: ClientConfig | None = None, **kwargs: Any):
        super().__init__(config or ClientConfig.standard(), **kwargs)

    @property
    def player_id(self) -> int:
        return self.config.player_id

    # ==========================================================================
    # Season averages
    # ==========================================================================

    def _season_averages(self, year: int) -> SeasonStats:
        payload = self.fetch_with_cache(
            "/season_averages", {"player_ids": [self.player_id], "season": year}
        )
        records = parse_records(payload, SeasonStats)
        if not records:
            raise NotFoundError(f"No season averages for {season_label(year)}")
        return records[0]

    @tracked_operation
    def get_current_season_stats(self) -> SeasonStats:
        """Current season averages with deltas against the previous season

        Falls back to fixture data when the request fails or the season has
        no averages yet.
        """
        year = current_season_year(self.now())
        try:
            stats = self._season_averages(year)
        except ApiError as e:
            return self._fallback("get_current_season_stats", e, self.fixtures.current_season_stats)

        previous = self.get_previous_season_stats(year - 1)
        return stats.model_copy(update=season_deltas(stats, previous))

    @tracked_operation
    def get_previous_season_stats(self, year: int | None = None) -> SeasonStats | None:
        """Averages for the season before the current one, or None if unavailable"""
        if year is None:
            year = current_season_year(self.now()) - 1
        try:
            return self._season_averages(year)
        except ApiError as e:
            logger.info(f"No previous season averages for {season_label(year)}: {e.message}")
            return None

    @tracked_operation
    def get_season_stats(self, season: str) -> SeasonStats:
        """Averages for one season, e.g. ``get_season_stats("2022-23")``"""
        try:
            return self._season_averages(season_year(season))
        except ApiError as e:
            return self._fallback(
                "get_season_stats", e, lambda: self.fixtures.season_stats(season)
            )

    def get_available_seasons(self) -> list[str]:
        """Season labels from the player's rookie season to now, newest first"""
        return available_seasons(self.now())

    # ==========================================================================
    # Schedule
    # ==========================================================================

    @tracked_operation
    def get_next_game(self) -> Game | None:
        """Earliest scheduled game after now, or None if none is listed"""
        try:
            payload = self.fetch_with_cache(
                "/games",
                {"team_ids": [self.config.team_id], "start_date": self.today(), "per_page": 5},
            )
            games = parse_records(payload, Game)
        except ApiError as e:
            return self._fallback("get_next_game", e, self.fixtures.next_game)

        now = self.now()
        upcoming = sorted((g for g in games if g.date > now), key=lambda g: g.date)
        return upcoming[0] if upcoming else None

    @tracked_operation
    def get_recent_games(self, limit: int = 5) -> list[RecentGame]:
        """Up to ``limit`` games from the last 30 days, newest first, with player stats

        Games without a stat line for the player (did not play) are skipped. A
        failed /games or /stats request substitutes fixture games for the whole
        list.
        """
        try:
            payload = self.fetch_with_cache(
                "/games",
                {
                    "team_ids": [self.config.team_id],
                    "start_date": self.date_string(-30),
                    "end_date": self.today(),
                    "per_page": GAMES_PER_PAGE,
                },
            )
            games = parse_records(payload, Game)

            now = self.now()
            played = sorted(
                (g for g in games if g.date <= now), key=lambda g: g.date, reverse=True
            )

            recent = []
            for game in played[:limit]:
                stats = self._game_stats(game.id)
                if stats is not None:
                    recent.append(RecentGame(**game.model_dump(), player_stats=stats))
        except ApiError as e:
            return self._fallback(
                "get_recent_games", e, lambda: self.fixtures.recent_games(limit)
            )
        return recent

    @tracked_operation
    def get_current_game(self) -> Game | None:
        """Today's game, or None when there is none or the request fails"""
        try:
            payload = self.fetch_with_cache(
                "/games", {"team_ids": [self.config.team_id], "dates": [self.today()]}
            )
            games = parse_records(payload, Game)
        except ApiError as e:
            logger.warning(f"Could not load today's game: {e.message}")
            return None

        today = self.now().date()
        return next((g for g in games if g.date.date() == today), None)

    # ==========================================================================
    # Per-game stats
    # ==========================================================================

    def _game_stats(self, game_id: int, player_id: int | None = None) -> PlayerGameStats | None:
        """The player's stat line for one game; raises ApiError instead of falling back"""
        payload = self.fetch_with_cache(
            "/stats", {"game_ids": [game_id], "player_ids": [player_id or self.player_id]}
        )
        records = parse_records(payload, PlayerGameStats)
        return records[0] if records else None

    @tracked_operation
    def get_player_game_stats(
        self, game_id: int, player_id: int | None = None
    ) -> PlayerGameStats | None:
        """The player's stat line for one game, or None if absent or unavailable"""
        try:
            return self._game_stats(game_id, player_id)
        except ApiError as e:
            logger.warning(f"Could not load stats for game {game_id}: {e.message}")
            return None

    @tracked_operation
    def get_live_player_stats(self, game_id: int, player_id: int | None = None) -> LiveGameStats:
        """Stat line for a game in progress, with triple-double flag and quarter split

        Raises:
            NotFoundError: If the game has no stat line for the player
        """
        stats = self.get_player_game_stats(game_id, player_id)
        if stats is None:
            raise NotFoundError(
                f"No stats for player {player_id or self.player_id} in game {game_id}"
            )

        return parse_record(
            {
                **stats.model_dump(),
                "is_triple_double": is_triple_double(stats.pts, stats.reb, stats.ast),
                "quarter_stats": [q.model_dump() for q in self.fixtures.quarter_stats(stats)],
            },
            LiveGameStats,
        )

    # ==========================================================================
    # Splits
    # ==========================================================================

    @tracked_operation
    def get_season_game_log(self, season: str) -> list[PlayerGameStats]:
        """Every game stat line of one season (paginated /stats)

        Raises:
            ApiError: If any page fails
        """
        items = self.fetch_all_pages(
            "/stats",
            {
                "player_ids": [self.player_id],
                "seasons": [season_year(season)],
                "per_page": GAMES_PER_PAGE,
            },
        )
        return [parse_record(item, PlayerGameStats) for item in items]

    @tracked_operation
    def get_monthly_stats(self, season: str) -> list[MonthlyStats]:
        """Per-month averages for a season"""
        try:
            months = monthly_splits(self.get_season_game_log(season))
            if not months:
                raise NotFoundError(f"No games played in {season}")
            return months
        except ApiError as e:
            return self._fallback(
                "get_monthly_stats", e, lambda: self.fixtures.monthly_stats(season)
            )

    @tracked_operation
    def get_home_away_stats(self, season: str) -> HomeAwayStats:
        """Home vs. away averages for a season"""
        try:
            splits = home_away_splits(self.get_season_game_log(season))
            if splits is None:
                raise NotFoundError(f"No games played in {season}")
            return splits
        except ApiError as e:
            return self._fallback(
                "get_home_away_stats", e, lambda: self.fixtures.home_away_stats(season)
            )

    @tracked_operation
    def get_opponent_stats(self, season: str) -> list[OpponentStats]:
        """Per-opponent averages and record for a season"""
        try:
            logs = self.get_season_game_log(season)
            teams = {team.id: team for team in self.get_teams()}
            splits = opponent_splits(logs, teams)
            if not splits:
                raise NotFoundError(f"No games played in {season}")
            return splits
        except ApiError as e:
            return self._fallback(
                "get_opponent_stats", e, lambda: self.fixtures.opponent_stats(season)
            )
