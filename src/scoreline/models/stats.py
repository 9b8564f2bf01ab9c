"""Player statistics models — totals, per-round breakdown, derived analytics.

All models serialize with camelCase keys (``model_dump(by_alias=True)``)
to match the profile screen's contract. Field names stay snake_case in Python.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

STAT_FIELDS: tuple[str, ...] = (
    "presences",
    "goals",
    "assists",
    "wins",
    "draws",
    "losses",
    "yellow_cards",
    "blue_cards",
    "penalties",
    "total_points",
    "matches",
)


class StatsMode(StrEnum):
    """How headline totals were produced for a request.

    HYBRID: cached snapshot + events newer than it.
    STANDARD: full recomputation over the fetched scope.
    """

    HYBRID = "hybrid"
    STANDARD = "standard"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class StatTotals(_CamelModel):
    """The eleven counters accumulated for a player over some period."""

    presences: int = 0
    goals: int = 0
    assists: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    yellow_cards: int = 0
    blue_cards: int = 0
    penalties: int = 0
    total_points: int = 0
    matches: int = 0

    def __add__(self, other: StatTotals) -> StatTotals:
        return StatTotals(
            **{name: getattr(self, name) + getattr(other, name) for name in STAT_FIELDS}
        )


class RoundStats(StatTotals):
    """Ground-truth stats for exactly one round."""

    round_id: str
    round_number: int
    round_date: date | None = None


class Ratios(_CamelModel):
    goals_per_match: float = 0.0
    assists_per_match: float = 0.0
    involvement_pct: float = 0.0
    win_rate_pct: float = 0.0


class PeriodSummary(_CamelModel):
    """One round or one month, labelled for display."""

    period: str
    points: int = 0
    goals: int = 0
    assists: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0


class BestWorstPeriods(_CamelModel):
    best_round: PeriodSummary
    worst_round: PeriodSummary
    best_month: PeriodSummary | None = None
    worst_month: PeriodSummary | None = None


class ProfileStats(_CamelModel):
    """Everything the profile screen needs for one (player, year, month) request."""

    totals: StatTotals = Field(default_factory=StatTotals)
    per_round: list[RoundStats] = Field(default_factory=list)
    available_years: list[str] = Field(default_factory=list)
    ratios: Ratios = Field(default_factory=Ratios)
    best_worst_periods: BestWorstPeriods | None = None
    cumulative_points: list[int] = Field(default_factory=list)
    mode: StatsMode = StatsMode.STANDARD
    is_loading: bool = False
