"""Ratios and best/worst periods derived from totals and the per-round series.

Pure functions with no database access.
"""

from __future__ import annotations

from itertools import accumulate

from scoreline.models.stats import (
    BestWorstPeriods,
    PeriodSummary,
    Ratios,
    RoundStats,
    StatTotals,
)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def compute_ratios(totals: StatTotals) -> Ratios:
    """Per-match averages and percentages. Zero matches yields zeros, never NaN."""
    matches = totals.matches or 1
    if totals.matches == 0:
        involvement = 0.0
        win_rate = 0.0
    else:
        involvement = (totals.goals + totals.assists) / totals.matches * 100
        win_rate = totals.wins / totals.matches * 100
    return Ratios(
        goals_per_match=totals.goals / matches,
        assists_per_match=totals.assists / matches,
        involvement_pct=involvement,
        win_rate_pct=win_rate,
    )


def _round_summary(rs: RoundStats) -> PeriodSummary:
    return PeriodSummary(
        period=f"Round {rs.round_number}",
        points=rs.total_points,
        goals=rs.goals,
        assists=rs.assists,
        wins=rs.wins,
        draws=rs.draws,
        losses=rs.losses,
    )


def monthly_summaries(per_round: list[RoundStats]) -> list[PeriodSummary]:
    """Sum rounds per (year, month), in order of each month's first appearance."""
    months: dict[tuple[int, int], PeriodSummary] = {}
    for rs in per_round:
        if rs.round_date is None:
            continue
        key = (rs.round_date.year, rs.round_date.month)
        current = months.get(key) or PeriodSummary(
            period=f"{MONTH_NAMES[key[1] - 1]} {key[0]}"
        )
        months[key] = current.model_copy(
            update={
                "points": current.points + rs.total_points,
                "goals": current.goals + rs.goals,
                "assists": current.assists + rs.assists,
                "wins": current.wins + rs.wins,
                "draws": current.draws + rs.draws,
                "losses": current.losses + rs.losses,
            }
        )
    return list(months.values())


def _extremes(periods: list[PeriodSummary]) -> tuple[PeriodSummary, PeriodSummary]:
    """(best, worst): first and last of a stable descending sort by points."""
    ranked = sorted(periods, key=lambda p: p.points, reverse=True)
    return ranked[0], ranked[-1]


def find_best_worst(per_round: list[RoundStats]) -> BestWorstPeriods | None:
    """Best/worst round and month by points. None when there is no history."""
    if not per_round:
        return None

    best_round, worst_round = _extremes([_round_summary(rs) for rs in per_round])

    months = monthly_summaries(per_round)
    best_month, worst_month = _extremes(months) if months else (None, None)

    return BestWorstPeriods(
        best_round=best_round,
        worst_round=worst_round,
        best_month=best_month,
        worst_month=worst_month,
    )


def cumulative_points(per_round: list[RoundStats]) -> list[int]:
    """Running points total across the series, for evolution charts."""
    return list(accumulate(rs.total_points for rs in per_round))
