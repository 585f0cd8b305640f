"""Season splits computed from a player's game log

The API has no split endpoints, so monthly, home/away and per-opponent
numbers are aggregated here from the /stats rows of one season. Games the
player did not play (zero minutes) are excluded.
"""

from __future__ import annotations

import logging

import pandas as pd

from .models import (
    Game,
    HomeAwayStats,
    MonthlyStats,
    OpponentStats,
    PlayerGameStats,
    RecentGame,
    SplitLine,
    Team,
)

logger = logging.getLogger(__name__)

LOG_COLUMNS = [
    "game_id",
    "date",
    "month",
    "month_name",
    "venue",
    "opponent_id",
    "won",
    "minutes",
    "pts",
    "reb",
    "ast",
    "fgm",
    "fga",
    "fg_pct",
]

NUMERIC_COLUMNS = ["minutes", "pts", "reb", "ast", "fgm", "fga", "fg_pct"]


def parse_minutes(value: str | float | None) -> float:
    """Convert "MM:SS", "MM" or a number to fractional minutes

    Example:
        >>> parse_minutes("36:45")
        36.75
    """
    if value is None or value == "":
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    minutes, _, seconds = str(value).partition(":")
    try:
        return float(minutes or 0) + (float(seconds) / 60 if seconds else 0.0)
    except ValueError:
        logger.warning(f"Unparseable minutes value: {value!r}")
        return 0.0


def game_log_frame(logs: list[PlayerGameStats]) -> pd.DataFrame:
    """One row per game played, with home/away, opponent and result resolved"""
    rows = []
    for stats in logs:
        game = stats.game
        if game is None:
            continue

        team_id = stats.team.id if stats.team is not None else None
        is_home = team_id is not None and team_id == game.home_team_id
        opponent_id = game.visitor_team_id if is_home else game.home_team_id
        own, other = (
            (game.home_team_score, game.visitor_team_score)
            if is_home
            else (game.visitor_team_score, game.home_team_score)
        )

        rows.append(
            {
                "game_id": game.id,
                "date": game.date,
                "month": game.date.strftime("%Y-%m"),
                "month_name": game.date.strftime("%B"),
                "venue": "home" if is_home else "away",
                "opponent_id": opponent_id,
                "won": own is not None and other is not None and own > other,
                "minutes": parse_minutes(stats.min),
                "pts": stats.pts,
                "reb": stats.reb,
                "ast": stats.ast,
                "fgm": stats.fgm,
                "fga": stats.fga,
                "fg_pct": stats.fg_pct,
            }
        )

    df = pd.DataFrame(rows, columns=LOG_COLUMNS)
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)

    return df[df["minutes"] > 0].sort_values("date").reset_index(drop=True)


def _aggregate(df: pd.DataFrame, by: str) -> pd.DataFrame:
    out = df.groupby(by, sort=True).agg(
        gp=("game_id", "count"),
        pts=("pts", "mean"),
        reb=("reb", "mean"),
        ast=("ast", "mean"),
        fgm=("fgm", "sum"),
        fga=("fga", "sum"),
        mean_fg_pct=("fg_pct", "mean"),
        wins=("won", "sum"),
    )
    # Prefer makes/attempts; fall back to the mean of per-game percentages
    out["fg_pct"] = (out["fgm"] / out["fga"]).where(out["fga"] > 0, out["mean_fg_pct"])
    out["losses"] = out["gp"] - out["wins"]
    out[["pts", "reb", "ast"]] = out[["pts", "reb", "ast"]].round(1)
    out["fg_pct"] = out["fg_pct"].round(3)
    return out


def monthly_splits(logs: list[PlayerGameStats]) -> list[MonthlyStats]:
    """Per-month averages in calendar order"""
    df = game_log_frame(logs)
    if df.empty:
        return []

    names = df.groupby("month")["month_name"].first()
    agg = _aggregate(df, "month")
    return [
        MonthlyStats(
            month=month,
            month_name=names[month],
            gp=int(row.gp),
            pts=float(row.pts),
            reb=float(row.reb),
            ast=float(row.ast),
            fg_pct=float(row.fg_pct),
        )
        for month, row in agg.iterrows()
    ]


def _split_line(agg: pd.DataFrame, key: str) -> SplitLine:
    if key not in agg.index:
        return SplitLine(gp=0, pts=0.0, reb=0.0, ast=0.0, fg_pct=0.0)
    row = agg.loc[key]
    return SplitLine(
        gp=int(row.gp),
        pts=float(row.pts),
        reb=float(row.reb),
        ast=float(row.ast),
        fg_pct=float(row.fg_pct),
    )


def home_away_splits(logs: list[PlayerGameStats]) -> HomeAwayStats | None:
    """Home vs. away averages, or None when no games were played"""
    df = game_log_frame(logs)
    if df.empty:
        return None

    agg = _aggregate(df, "venue")
    return HomeAwayStats(home=_split_line(agg, "home"), away=_split_line(agg, "away"))


def opponent_splits(logs: list[PlayerGameStats], teams: dict[int, Team]) -> list[OpponentStats]:
    """Per-opponent averages and record, most-played opponents first

    Args:
        logs: Season game log
        teams: Team lookup by id (unknown ids get a placeholder team)
    """
    df = game_log_frame(logs)
    df = df[df["opponent_id"].notna()]
    if df.empty:
        return []

    agg = _aggregate(df.astype({"opponent_id": int}), "opponent_id")
    agg = agg.sort_values(["gp", "wins"], ascending=False)

    results = []
    for opponent_id, row in agg.iterrows():
        opponent = teams.get(int(opponent_id)) or Team(
            id=int(opponent_id), abbreviation=f"T{opponent_id}", full_name=f"Team {opponent_id}"
        )
        results.append(
            OpponentStats(
                opponent=opponent,
                gp=int(row.gp),
                pts=float(row.pts),
                reb=float(row.reb),
                ast=float(row.ast),
                fg_pct=float(row.fg_pct),
                wins=int(row.wins),
                losses=int(row.losses),
            )
        )
    return results


def games_frame(games: list[Game]) -> pd.DataFrame:
    """Tabular view of a game list (player stat columns for RecentGame rows)"""
    rows = []
    for game in games:
        row = {
            "game_id": game.id,
            "date": game.date,
            "home_team": game.home_team.abbreviation,
            "visitor_team": game.visitor_team.abbreviation,
            "home_score": game.home_team_score,
            "visitor_score": game.visitor_team_score,
            "status": game.status,
        }
        if isinstance(game, RecentGame) and game.player_stats is not None:
            row.update(
                pts=game.player_stats.pts,
                reb=game.player_stats.reb,
                ast=game.player_stats.ast,
            )
        rows.append(row)

    return pd.DataFrame(
        rows,
        columns=[
            "game_id", "date", "home_team", "visitor_team",
            "home_score", "visitor_score", "status", "pts", "reb", "ast",
        ],
    )
