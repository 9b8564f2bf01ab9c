"""Repository pattern for database access.

Wraps SQLAlchemy async sessions. The stats engine only uses the read
queries; the ``create_*`` / ``record_*`` helpers stand in for the external
writers (round closing, event entry, snapshot job) in tests and demo seeding.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, date, datetime
from typing import Any, TypeVar

from sqlalchemy import Row, Select, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from scoreline.db.engine import get_session
from scoreline.db.models import (
    AssistRow,
    GoalRow,
    MatchRow,
    PlayerRoundStatsRow,
    PlayerRow,
    PlayerStatsSnapshotRow,
    PunishmentRow,
    RoundRow,
)

T = TypeVar("T")


def _scope_to_year(stmt: Select[Any], year: int | None) -> Select[Any]:
    """Bound a statement already joined to ``rounds`` to one calendar year."""
    if year is None:
        return stmt
    return stmt.where(
        RoundRow.scheduled_date >= date(year, 1, 1),
        RoundRow.scheduled_date <= date(year, 12, 31),
    )


class Repository:
    """Async repository for all database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Players ---

    async def create_player(self, name: str, level: str = "", position: str = "") -> PlayerRow:
        row = PlayerRow(name=name, level=level, position=position)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_player(self, player_id: str) -> PlayerRow | None:
        return await self.session.get(PlayerRow, player_id)

    # --- Rounds / matches ---

    async def create_round(
        self,
        round_number: int,
        scheduled_date: date | None,
        status: str = "finalized",
    ) -> RoundRow:
        row = RoundRow(round_number=round_number, scheduled_date=scheduled_date, status=status)
        self.session.add(row)
        await self.session.flush()
        return row

    async def create_match(
        self,
        round_id: str,
        match_number: int = 1,
        team_home: str = "white",
        team_away: str = "green",
    ) -> MatchRow:
        row = MatchRow(
            round_id=round_id,
            match_number=match_number,
            team_home=team_home,
            team_away=team_away,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    # --- Player events (external writers) ---

    async def record_round_stats(
        self,
        player_id: str,
        round_id: str,
        *,
        victories: int = 0,
        draws: int = 0,
        defeats: int = 0,
        yellow_cards: int = 0,
        blue_cards: int = 0,
        presence_points: int = 0,
        total_points: int = 0,
    ) -> PlayerRoundStatsRow:
        row = PlayerRoundStatsRow(
            player_id=player_id,
            round_id=round_id,
            victories=victories,
            draws=draws,
            defeats=defeats,
            yellow_cards=yellow_cards,
            blue_cards=blue_cards,
            presence_points=presence_points,
            total_points=total_points,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def record_goal(
        self,
        match_id: str,
        player_id: str | None,
        team_color: str = "white",
        minute: int = 0,
        is_own_goal: bool = False,
        assist_player_id: str | None = None,
    ) -> GoalRow:
        """Store a goal and, when given, the assist credited for it."""
        goal = GoalRow(
            match_id=match_id,
            player_id=player_id,
            team_color=team_color,
            minute=minute,
            is_own_goal=is_own_goal,
        )
        self.session.add(goal)
        await self.session.flush()
        if assist_player_id is not None:
            self.session.add(AssistRow(goal_id=goal.id, player_id=assist_player_id))
            await self.session.flush()
        return goal

    async def record_punishment(
        self,
        player_id: str,
        round_id: str,
        points: int,
        reason: str | None = None,
    ) -> PunishmentRow:
        row = PunishmentRow(player_id=player_id, round_id=round_id, points=points, reason=reason)
        self.session.add(row)
        await self.session.flush()
        return row

    async def store_stats_snapshot(
        self,
        player_id: str,
        updated_at: datetime,
        **totals: int,
    ) -> PlayerStatsSnapshotRow:
        """Insert or replace the player's snapshot (the batch job's write).

        SQLite keeps only wall-clock time, so aware timestamps are stored as UTC.
        """
        if updated_at.tzinfo is not None:
            updated_at = updated_at.astimezone(UTC).replace(tzinfo=None)
        row = await self.session.get(PlayerStatsSnapshotRow, player_id)
        if row is None:
            row = PlayerStatsSnapshotRow(player_id=player_id, updated_at=updated_at)
            self.session.add(row)
        row.updated_at = updated_at
        for field_name, value in totals.items():
            setattr(row, field_name, value)
        await self.session.flush()
        return row

    # --- Stats reads ---

    async def get_stats_snapshot(self, player_id: str) -> PlayerStatsSnapshotRow | None:
        """Get the player's cached aggregate, or None for players never snapshotted."""
        return await self.session.get(PlayerStatsSnapshotRow, player_id)

    async def get_round_stats_for_player(
        self,
        player_id: str,
        year: int | None = None,
    ) -> list[Row[tuple[PlayerRoundStatsRow, RoundRow]]]:
        """Per-round participation rows joined to their round, for dated rounds only."""
        stmt = (
            select(PlayerRoundStatsRow, RoundRow)
            .join(RoundRow, PlayerRoundStatsRow.round_id == RoundRow.id)
            .where(
                PlayerRoundStatsRow.player_id == player_id,
                RoundRow.scheduled_date.isnot(None),
            )
            .order_by(RoundRow.round_number)
        )
        result = await self.session.execute(_scope_to_year(stmt, year))
        return list(result.all())

    async def get_goals_for_player(
        self,
        player_id: str,
        year: int | None = None,
    ) -> list[Row[tuple[str, date]]]:
        """(goal id, round date) for every goal the player scored. Own goals excluded."""
        stmt = (
            select(GoalRow.id, RoundRow.scheduled_date)
            .join(MatchRow, GoalRow.match_id == MatchRow.id)
            .join(RoundRow, MatchRow.round_id == RoundRow.id)
            .where(
                GoalRow.player_id == player_id,
                GoalRow.is_own_goal.is_(False),
                RoundRow.scheduled_date.isnot(None),
            )
        )
        result = await self.session.execute(_scope_to_year(stmt, year))
        return list(result.all())

    async def get_assists_for_player(
        self,
        player_id: str,
        year: int | None = None,
    ) -> list[Row[tuple[str, date]]]:
        """(assist id, round date) for every assist, joined goal → match → round."""
        stmt = (
            select(AssistRow.id, RoundRow.scheduled_date)
            .join(GoalRow, AssistRow.goal_id == GoalRow.id)
            .join(MatchRow, GoalRow.match_id == MatchRow.id)
            .join(RoundRow, MatchRow.round_id == RoundRow.id)
            .where(
                AssistRow.player_id == player_id,
                RoundRow.scheduled_date.isnot(None),
            )
        )
        result = await self.session.execute(_scope_to_year(stmt, year))
        return list(result.all())

    async def get_punishments_for_player(
        self,
        player_id: str,
        year: int | None = None,
    ) -> list[Row[tuple[str, str, date, int]]]:
        """(punishment id, round id, round date, signed points) per punishment."""
        stmt = (
            select(
                PunishmentRow.id,
                PunishmentRow.round_id,
                RoundRow.scheduled_date,
                PunishmentRow.points,
            )
            .join(RoundRow, PunishmentRow.round_id == RoundRow.id)
            .where(
                PunishmentRow.player_id == player_id,
                RoundRow.scheduled_date.isnot(None),
            )
        )
        result = await self.session.execute(_scope_to_year(stmt, year))
        return list(result.all())

    async def get_round_dates_for_player(self, player_id: str) -> list[date]:
        """Dates of every round the player has a participation row for, unfiltered."""
        stmt = (
            select(RoundRow.scheduled_date)
            .join(PlayerRoundStatsRow, PlayerRoundStatsRow.round_id == RoundRow.id)
            .where(
                PlayerRoundStatsRow.player_id == player_id,
                RoundRow.scheduled_date.isnot(None),
            )
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


async def read_with(engine: AsyncEngine, query: Callable[[Repository], Awaitable[T]]) -> T:
    """Run *query* against a repository bound to its own short-lived session.

    Concurrent fetches must not share an ``AsyncSession``; each call here
    gets a fresh one.
    """
    async with get_session(engine) as session:
        return await query(Repository(session))
