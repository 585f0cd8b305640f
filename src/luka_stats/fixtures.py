"""Fixture provider for fallback data

When live data is unavailable the clients substitute records from a
``FixtureProvider``. Fixtures are built from the same pydantic models as
validated API responses, so callers get identical shapes either way.

The provider is injected into each client; pass a seeded ``random.Random``
to get reproducible values in tests.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from .config import LAKERS_TEAM_ID, LUKA_PLAYER_ID, MAVERICKS_TEAM_ID
from .models import (
    Game,
    GameRef,
    HomeAwayStats,
    MonthlyStats,
    OpponentStats,
    Player,
    PlayerGameStats,
    QuarterStats,
    RecentGame,
    SeasonStats,
    SplitLine,
    Standing,
    StatLine,
    Team,
    current_season_year,
    season_label,
    season_year,
)

# ==============================================================================
# Reference data
# ==============================================================================

TEAMS: dict[int, Team] = {
    team.id: team
    for team in (
        Team(id=7, abbreviation="DAL", full_name="Dallas Mavericks", city="Dallas",
             name="Mavericks", conference="West", division="Southwest"),
        Team(id=14, abbreviation="LAL", full_name="Los Angeles Lakers", city="Los Angeles",
             name="Lakers", conference="West", division="Pacific"),
        Team(id=10, abbreviation="GSW", full_name="Golden State Warriors", city="Golden State",
             name="Warriors", conference="West", division="Pacific"),
        Team(id=13, abbreviation="LAC", full_name="LA Clippers", city="LA",
             name="Clippers", conference="West", division="Pacific"),
        Team(id=24, abbreviation="PHX", full_name="Phoenix Suns", city="Phoenix",
             name="Suns", conference="West", division="Pacific"),
        Team(id=8, abbreviation="DEN", full_name="Denver Nuggets", city="Denver",
             name="Nuggets", conference="West", division="Northwest"),
    )
}

# Two teammates per tracked team, listed after the tracked player on rosters
TEAMMATES: dict[int, list[dict]] = {
    MAVERICKS_TEAM_ID: [
        {"id": 228, "first_name": "Kyrie", "last_name": "Irving", "position": "PG"},
        {"id": 201, "first_name": "Tim", "last_name": "Hardaway Jr.", "position": "SG"},
    ],
    LAKERS_TEAM_ID: [
        {"id": 237, "first_name": "LeBron", "last_name": "James", "position": "F"},
        {"id": 666, "first_name": "Austin", "last_name": "Reaves", "position": "G"},
    ],
}

SEASON_MONTHS = [
    (10, "October"),
    (11, "November"),
    (12, "December"),
    (1, "January"),
    (2, "February"),
    (3, "March"),
    (4, "April"),
]


class FixtureProvider:
    """Builds fallback records for one tracked team and player

    Args:
        team: Tracked team
        player: Tracked player
        opponents: Teams used as opponents in games and splits
        rng: Random source for varying stat values (seed it for reproducibility)
        clock: Returns the current time in seconds
    """

    def __init__(
        self,
        team: Team,
        player: Player,
        opponents: list[Team],
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.team = team
        self.player = player
        self.opponents = opponents
        self.rng = rng or random.Random()
        self.clock = clock

    @classmethod
    def for_team(
        cls,
        team_id: int = MAVERICKS_TEAM_ID,
        player_id: int = LUKA_PLAYER_ID,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> FixtureProvider:
        """Provider for a team from the reference table (unknown ids get a placeholder team)"""
        team = TEAMS.get(team_id) or Team(
            id=team_id, abbreviation=f"T{team_id}", full_name=f"Team {team_id}"
        )
        player = Player(
            id=player_id,
            first_name="Luka",
            last_name="Doncic",
            position="PG-SG",
            height_feet=6,
            height_inches=7,
            weight_pounds=230,
            team=team,
        )
        opponents = [t for t in TEAMS.values() if t.id != team_id]
        return cls(team=team, player=player, opponents=opponents, rng=rng, clock=clock)

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.clock(), tz=UTC)

    def _opponent(self, index: int) -> Team:
        return self.opponents[index % len(self.opponents)]

    # ==========================================================================
    # Teams, players, standings
    # ==========================================================================

    def teams(self) -> list[Team]:
        return [self.team, *self.opponents]

    def team_info(self) -> Team:
        return self.team

    def player_info(self) -> Player:
        return self.player

    def roster(self) -> list[Player]:
        teammates = [Player(**p, team=self.team) for p in TEAMMATES.get(self.team.id, [])]
        return [self.player, *teammates]

    def team_standing(self) -> Standing:
        return Standing(
            team=self.team,
            wins=35,
            losses=25,
            win_percentage=0.583,
            conference_rank=7,
            games_behind=5.5,
            season=current_season_year(self.now()),
        )

    def standings(self) -> list[Standing]:
        return [self.team_standing()]

    # ==========================================================================
    # Games
    # ==========================================================================

    def games(self) -> list[Game]:
        return [
            Game(
                id=1,
                date=self.now(),
                home_team=self.team,
                visitor_team=self._opponent(0),
                home_team_score=115,
                visitor_team_score=110,
                season=current_season_year(self.now()),
                status="Final",
            )
        ]

    def next_game(self) -> Game:
        return Game(
            id=999999,
            date=self.now() + timedelta(days=1),
            home_team=self.team,
            visitor_team=self._opponent(0),
            season=current_season_year(self.now()),
            status="upcoming",
        )

    def recent_games(self, limit: int = 5, with_stats: bool = True) -> list[RecentGame]:
        """Finished games over the last ``limit`` days, newest first

        Args:
            limit: Number of games
            with_stats: Attach the tracked player's stat line to each game
        """
        games = []
        for i in range(1, limit + 1):
            opponent = self._opponent(i - 1)
            home, visitor = (self.team, opponent) if i % 2 else (opponent, self.team)
            game_id = 999990 - i
            date = self.now() - timedelta(days=i)
            player_stats = None
            if with_stats:
                player_stats = PlayerGameStats(
                    player=self.player,
                    team=self.team,
                    game=GameRef(
                        id=game_id,
                        date=date,
                        home_team_id=home.id,
                        visitor_team_id=visitor.id,
                    ),
                    pts=self.rng.randint(20, 44),
                    reb=self.rng.randint(6, 13),
                    ast=self.rng.randint(5, 14),
                    fg_pct=round(0.4 + self.rng.random() * 0.2, 3),
                    min="36:45",
                )
            games.append(
                RecentGame(
                    id=game_id,
                    date=date,
                    home_team=home,
                    visitor_team=visitor,
                    home_team_score=100 + self.rng.randint(0, 29),
                    visitor_team_score=100 + self.rng.randint(0, 29),
                    season=current_season_year(self.now()),
                    status="Final",
                    player_stats=player_stats,
                )
            )
        return games

    # ==========================================================================
    # Season stats
    # ==========================================================================

    def current_season_stats(self) -> SeasonStats:
        return SeasonStats(
            player_id=self.player.id,
            season=season_label(current_season_year(self.now())),
            gp=45,
            pts=32.8,
            reb=8.9,
            ast=9.1,
            fg_pct=0.487,
            fg3_pct=0.348,
            ft_pct=0.786,
            pts_change=2.1,
            reb_change=0.3,
            ast_change=0.8,
            fg_pct_change=0.012,
        )

    def season_stats(self, season: str) -> SeasonStats:
        rng = self.rng
        return SeasonStats(
            player_id=self.player.id,
            season=season,
            gp=70,
            pts=round(28.4 + rng.random() * 8, 1),
            reb=round(8.8 + rng.random() * 2, 1),
            ast=round(8.7 + rng.random() * 2, 1),
            fg_pct=round(0.45 + rng.random() * 0.08, 3),
            fg3_pct=round(0.32 + rng.random() * 0.06, 3),
            ft_pct=round(0.74 + rng.random() * 0.12, 3),
            min=35.5,
            triple_doubles=rng.randint(8, 22),
            career_high_pts=60,
            career_high_reb=18,
            career_high_ast=17,
        )

    # ==========================================================================
    # Splits
    # ==========================================================================

    def monthly_stats(self, season: str) -> list[MonthlyStats]:
        start = season_year(season)
        rng = self.rng
        return [
            MonthlyStats(
                month=f"{start if month >= 10 else start + 1}-{month:02d}",
                month_name=name,
                gp=rng.randint(8, 15),
                pts=round(25 + rng.random() * 15, 1),
                reb=round(7 + rng.random() * 4, 1),
                ast=round(6 + rng.random() * 6, 1),
                fg_pct=round(0.4 + rng.random() * 0.15, 3),
            )
            for month, name in SEASON_MONTHS
        ]

    def home_away_stats(self, season: str) -> HomeAwayStats:
        return HomeAwayStats(
            home=SplitLine(pts=30.2, reb=9.1, ast=9.8, fg_pct=0.495),
            away=SplitLine(pts=28.6, reb=8.3, ast=8.4, fg_pct=0.472),
        )

    def opponent_stats(self, season: str) -> list[OpponentStats]:
        rng = self.rng
        return [
            OpponentStats(
                opponent=opponent,
                gp=rng.randint(2, 4),
                pts=round(25 + rng.random() * 15, 1),
                reb=round(7 + rng.random() * 4, 1),
                ast=round(6 + rng.random() * 6, 1),
                fg_pct=round(0.4 + rng.random() * 0.15, 3),
                wins=rng.randint(1, 3),
                losses=rng.randint(0, 1),
            )
            for opponent in self.opponents[:5]
        ]

    def quarter_stats(self, totals: StatLine) -> list[QuarterStats]:
        """Split a game stat line across four quarters

        Per-quarter points, rebounds and assists always sum to the totals.
        """
        pts = self._split(totals.pts)
        reb = self._split(totals.reb)
        ast = self._split(totals.ast)
        if totals.fgm is not None and totals.fga is not None:
            made = self._split(totals.fgm)
            attempted = [max(a, m) for a, m in zip(self._split(totals.fga), made)]
        else:
            made = [self.rng.randint(1, 5) for _ in range(4)]
            attempted = [m + self.rng.randint(2, 4) for m in made]

        return [
            QuarterStats(
                quarter=q + 1,
                pts=pts[q],
                reb=reb[q],
                ast=ast[q],
                fg_made=made[q],
                fg_attempted=attempted[q],
                minutes_played=12,
            )
            for q in range(4)
        ]

    def _split(self, total: float | None, parts: int = 4) -> list[int]:
        remaining = int(total or 0)
        shares = []
        for left in range(parts, 0, -1):
            if left == 1:
                share = remaining
            else:
                share = min(remaining, remaining // left + self.rng.randint(0, 1))
            shares.append(share)
            remaining -= share
        return shares
