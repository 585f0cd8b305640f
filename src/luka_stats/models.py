"""
Pydantic models for Ball Don't Lie payloads and derived stat records.

Every payload coming back from the API is validated here before a client
hands it to callers. Fixture data is built from the same models, so callers
never branch on live vs. fallback shapes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .errors import ResponseValidationError

Number = int | float
StatTrend = Literal["up", "down", "stable"]

FIRST_SEASON = 2018  # Doncic's rookie season


class ApiModel(BaseModel):
    """Base for API records; unknown fields are kept, missing required ones rejected."""

    model_config = ConfigDict(extra="allow")


# ============================================================================
# Entities
# ============================================================================


class Team(ApiModel):
    id: int
    abbreviation: str
    full_name: str
    city: str | None = None
    name: str | None = None
    conference: str | None = None
    division: str | None = None


class Player(ApiModel):
    id: int
    first_name: str
    last_name: str
    position: str | None = None
    height_feet: int | None = None
    height_inches: int | None = None
    weight_pounds: int | None = None
    team: Team | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


def _date_only_to_midnight(value: Any) -> Any:
    # "2024-01-15" -> "2024-01-15T00:00:00"
    if isinstance(value, str) and len(value) == 10:
        return f"{value}T00:00:00"
    return value


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


# Naive timestamps from the API are UTC
UtcDatetime = Annotated[
    datetime, BeforeValidator(_date_only_to_midnight), AfterValidator(_as_utc)
]


class Game(ApiModel):
    """A scheduled or finished game with both teams embedded."""

    id: int
    date: UtcDatetime
    home_team: Team
    visitor_team: Team
    home_team_score: int | None = None
    visitor_team_score: int | None = None
    period: int | None = None
    postseason: bool | None = None
    season: int | None = None
    status: str | None = None
    time: str | None = None


class GameRef(ApiModel):
    """Game summary embedded in /stats rows (team ids only)."""

    id: int
    date: UtcDatetime
    home_team_id: int | None = None
    visitor_team_id: int | None = None
    home_team_score: int | None = None
    visitor_team_score: int | None = None
    season: int | None = None
    postseason: bool | None = None
    status: str | None = None


# ============================================================================
# Stat lines
# ============================================================================


class StatLine(ApiModel):
    """Box-score style counting stats; every field is optional."""

    pts: Number | None = None
    reb: Number | None = None
    ast: Number | None = None
    stl: Number | None = None
    blk: Number | None = None
    turnover: Number | None = None
    pf: Number | None = None
    oreb: Number | None = None
    dreb: Number | None = None
    fgm: Number | None = None
    fga: Number | None = None
    fg_pct: float | None = None
    fg3m: Number | None = None
    fg3a: Number | None = None
    fg3_pct: float | None = None
    ftm: Number | None = None
    fta: Number | None = None
    ft_pct: float | None = None
    min: str | float | None = None


class PlayerGameStats(StatLine):
    """One row of the /stats endpoint."""

    id: int | None = None
    player: Player | None = None
    team: Team | None = None
    game: GameRef | None = None


class SeasonStats(StatLine):
    """Season averages, optionally with deltas against the previous season."""

    player_id: int | None = None
    season: str | None = None
    gp: int | None = None

    pts_change: float | None = None
    reb_change: float | None = None
    ast_change: float | None = None
    fg_pct_change: float | None = None

    career_high_pts: int | None = None
    career_high_reb: int | None = None
    career_high_ast: int | None = None
    triple_doubles: int | None = None

    @field_validator("season", mode="before")
    @classmethod
    def _label_season(cls, value: Any) -> Any:
        # The API reports the starting year; records carry the "2023-24" label
        if isinstance(value, int):
            return season_label(value)
        return value

    def trend(self, field: str) -> StatTrend:
        """Trend of a ``*_change`` field, e.g. ``stats.trend("pts")``"""
        return stat_trend(getattr(self, f"{field}_change"))


class QuarterStats(BaseModel):
    quarter: int = Field(ge=1, le=4)
    pts: int
    reb: int
    ast: int
    fg_made: int
    fg_attempted: int
    minutes_played: int


class LiveGameStats(PlayerGameStats):
    is_triple_double: bool = False
    quarter_stats: list[QuarterStats] = Field(default_factory=list)
    game_time_remaining: str | None = None
    current_quarter: int | None = None


class RecentGame(Game):
    """A finished game joined with the tracked player's stat line."""

    player_stats: PlayerGameStats | None = None


# ============================================================================
# Splits and standings
# ============================================================================


class MonthlyStats(ApiModel):
    month: str  # YYYY-MM
    month_name: str
    gp: int
    pts: float
    reb: float
    ast: float
    fg_pct: float


class SplitLine(ApiModel):
    gp: int | None = None
    pts: float
    reb: float
    ast: float
    fg_pct: float


class HomeAwayStats(ApiModel):
    home: SplitLine
    away: SplitLine


class OpponentStats(ApiModel):
    opponent: Team
    gp: int
    pts: float
    reb: float
    ast: float
    fg_pct: float
    wins: int
    losses: int


class Standing(ApiModel):
    team: Team
    wins: int
    losses: int
    win_percentage: float | None = None
    conference_rank: int | None = None
    division_rank: int | None = None
    games_behind: float | None = None
    season: int | None = None


# ============================================================================
# Response envelope
# ============================================================================


class PageMeta(ApiModel):
    total_pages: int | None = None
    current_page: int | None = None
    next_page: int | None = None
    per_page: int | None = None
    total_count: int | None = None
    next_cursor: int | None = None


class ApiResponse(ApiModel):
    """``{data: [...], meta: {...}}`` envelope returned by every endpoint."""

    data: list[dict[str, Any]]
    meta: PageMeta | None = None


M = TypeVar("M", bound=BaseModel)


def parse_response(payload: Any) -> ApiResponse:
    """Validate the response envelope

    Raises:
        ResponseValidationError: If payload is not a ``{data: [...]}`` object
    """
    try:
        return ApiResponse.model_validate(payload)
    except ValidationError as e:
        raise ResponseValidationError(f"Malformed API response: {e}") from e


def parse_record(data: Any, model: type[M]) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResponseValidationError(f"Malformed {model.__name__} record: {e}") from e


def parse_records(payload: Any, model: type[M]) -> list[M]:
    """Validate an envelope and every record in its data list

    Example:
        >>> teams = parse_records({"data": [{"id": 6, "abbreviation": "DAL",
        ...     "full_name": "Dallas Mavericks"}]}, Team)
        >>> teams[0].abbreviation
        'DAL'
    """
    return [parse_record(item, model) for item in parse_response(payload).data]


# ============================================================================
# Derived values
# ============================================================================


def is_triple_double(points: Number | None, rebounds: Number | None, assists: Number | None) -> bool:
    """True iff points, rebounds and assists are all at least 10"""
    return (points or 0) >= 10 and (rebounds or 0) >= 10 and (assists or 0) >= 10


DELTA_FIELDS = ("pts", "reb", "ast", "fg_pct")


def season_deltas(current: StatLine, previous: StatLine | None) -> dict[str, float]:
    """Season-over-season change for pts, reb, ast and fg_pct

    Missing previous season (or a missing value on either side) yields 0.

    Example:
        >>> round(season_deltas(SeasonStats(pts=32.8), SeasonStats(pts=30.7))["pts_change"], 1)
        2.1
    """
    deltas = {}
    for field in DELTA_FIELDS:
        now_value = getattr(current, field)
        then_value = getattr(previous, field) if previous is not None else None
        if now_value is None or then_value is None:
            deltas[f"{field}_change"] = 0.0
        else:
            deltas[f"{field}_change"] = float(now_value) - float(then_value)
    return deltas


def stat_trend(change: float | None) -> StatTrend:
    if change is None or change == 0:
        return "stable"
    return "up" if change > 0 else "down"


def season_label(year: int) -> str:
    """2023 -> '2023-24'"""
    return f"{year}-{str(year + 1)[-2:]}"


def season_year(season: str | int) -> int:
    """'2023-24' -> 2023"""
    if isinstance(season, int):
        return season
    return int(str(season).split("-")[0])


def current_season_year(now: datetime) -> int:
    """Starting year of the season in progress at ``now`` (seasons open in October)"""
    return now.year if now.month >= 10 else now.year - 1


def available_seasons(now: datetime, first: int = FIRST_SEASON) -> list[str]:
    """Season labels from ``first`` through the current season, newest first"""
    return [season_label(year) for year in range(current_season_year(now), first - 1, -1)]
