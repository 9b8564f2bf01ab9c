"""Fetch a player's full event history for a scope.

The fetch is never bounded by the snapshot timestamp: the per-round chart
and best/worst analytics need the whole period regardless of how headline
totals end up being computed. Splitting old vs. new happens afterwards in
``scoreline.core.delta``. Month scoping is likewise a row filter here, not
a separate query.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.ext.asyncio import AsyncEngine

from scoreline.db.repository import Repository, read_with

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundParticipation:
    """One player_round_stats row with its round's number and date."""

    round_id: str
    round_number: int
    round_date: date
    victories: int = 0
    draws: int = 0
    defeats: int = 0
    yellow_cards: int = 0
    blue_cards: int = 0
    presence_points: int = 0
    total_points: int = 0


@dataclass(frozen=True)
class GoalEvent:
    goal_id: str
    round_date: date


@dataclass(frozen=True)
class AssistEvent:
    assist_id: str
    round_date: date


@dataclass(frozen=True)
class PenaltyEvent:
    penalty_id: str
    round_id: str
    round_date: date
    points: int


@dataclass(frozen=True)
class EventRange:
    """Immutable bundle of everything fetched for one (player, year) scope."""

    participations: tuple[RoundParticipation, ...] = field(default_factory=tuple)
    goals: tuple[GoalEvent, ...] = field(default_factory=tuple)
    assists: tuple[AssistEvent, ...] = field(default_factory=tuple)
    penalties: tuple[PenaltyEvent, ...] = field(default_factory=tuple)

    def for_month(self, month: int | None) -> EventRange:
        """Keep only rows whose round falls in *month* (1-12). None keeps everything."""
        if month is None:
            return self
        return EventRange(
            participations=tuple(p for p in self.participations if p.round_date.month == month),
            goals=tuple(g for g in self.goals if g.round_date.month == month),
            assists=tuple(a for a in self.assists if a.round_date.month == month),
            penalties=tuple(p for p in self.penalties if p.round_date.month == month),
        )


async def _participations(
    repo: Repository, player_id: str, year: int | None
) -> tuple[RoundParticipation, ...]:
    rows = await repo.get_round_stats_for_player(player_id, year)
    return tuple(
        RoundParticipation(
            round_id=rnd.id,
            round_number=rnd.round_number,
            round_date=rnd.scheduled_date,
            victories=stats.victories or 0,
            draws=stats.draws or 0,
            defeats=stats.defeats or 0,
            yellow_cards=stats.yellow_cards or 0,
            blue_cards=stats.blue_cards or 0,
            presence_points=stats.presence_points or 0,
            total_points=stats.total_points or 0,
        )
        for stats, rnd in rows
    )


async def _goals(repo: Repository, player_id: str, year: int | None) -> tuple[GoalEvent, ...]:
    rows = await repo.get_goals_for_player(player_id, year)
    return tuple(GoalEvent(goal_id=goal_id, round_date=day) for goal_id, day in rows)


async def _assists(
    repo: Repository, player_id: str, year: int | None
) -> tuple[AssistEvent, ...]:
    rows = await repo.get_assists_for_player(player_id, year)
    return tuple(AssistEvent(assist_id=assist_id, round_date=day) for assist_id, day in rows)


async def _penalties(
    repo: Repository, player_id: str, year: int | None
) -> tuple[PenaltyEvent, ...]:
    rows = await repo.get_punishments_for_player(player_id, year)
    return tuple(
        PenaltyEvent(penalty_id=pid, round_id=round_id, round_date=day, points=points or 0)
        for pid, round_id, day, points in rows
    )


async def fetch_event_range(
    engine: AsyncEngine,
    player_id: str,
    year: int | None = None,
) -> EventRange:
    """Fetch participations, goals, assists and penalties for a player concurrently.

    Each query runs in its own session. All queries are awaited to completion;
    if any failed, the first error is raised and no partial ``EventRange`` is
    returned.
    """
    results = await asyncio.gather(
        read_with(engine, lambda repo: _participations(repo, player_id, year)),
        read_with(engine, lambda repo: _goals(repo, player_id, year)),
        read_with(engine, lambda repo: _assists(repo, player_id, year)),
        read_with(engine, lambda repo: _penalties(repo, player_id, year)),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    participations, goals, assists, penalties = results
    logger.debug(
        "event_range_fetched player=%s year=%s rounds=%d goals=%d assists=%d penalties=%d",
        player_id,
        year,
        len(participations),
        len(goals),
        len(assists),
        len(penalties),
    )
    return EventRange(
        participations=participations,
        goals=goals,
        assists=assists,
        penalties=penalties,
    )
