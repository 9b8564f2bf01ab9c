"""SQLAlchemy ORM models for the Scoreline database.

Every table here is written by an external process (round closing,
event entry forms, the nightly snapshot job). The stats engine only reads.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class PlayerRow(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[str] = mapped_column(String(20), default="")
    position: Mapped[str] = mapped_column(String(20), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))


class RoundRow(Base):
    __tablename__ = "rounds"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="scheduled")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    matches: Mapped[list[MatchRow]] = relationship(back_populates="round")

    __table_args__ = (Index("ix_rounds_scheduled_date", "scheduled_date"),)


class MatchRow(Base):
    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    round_id: Mapped[str] = mapped_column(ForeignKey("rounds.id"), nullable=False)
    match_number: Mapped[int] = mapped_column(Integer, nullable=False)
    team_home: Mapped[str] = mapped_column(String(20), nullable=False)
    team_away: Mapped[str] = mapped_column(String(20), nullable=False)
    score_home: Mapped[int] = mapped_column(Integer, default=0)
    score_away: Mapped[int] = mapped_column(Integer, default=0)

    round: Mapped[RoundRow] = relationship(back_populates="matches")

    __table_args__ = (Index("ix_matches_round_id", "round_id"),)


class PlayerRoundStatsRow(Base):
    """Per-round totals for one player, written when a round is closed."""

    __tablename__ = "player_round_stats"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    round_id: Mapped[str] = mapped_column(ForeignKey("rounds.id"), nullable=False)
    victories: Mapped[int] = mapped_column(Integer, default=0)
    draws: Mapped[int] = mapped_column(Integer, default=0)
    defeats: Mapped[int] = mapped_column(Integer, default=0)
    yellow_cards: Mapped[int] = mapped_column(Integer, default=0)
    blue_cards: Mapped[int] = mapped_column(Integer, default=0)
    presence_points: Mapped[int] = mapped_column(Integer, default=0)
    total_points: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        Index("ix_player_round_stats_player_id", "player_id"),
        UniqueConstraint("player_id", "round_id", name="uq_player_round"),
    )


class GoalRow(Base):
    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    match_id: Mapped[str] = mapped_column(ForeignKey("matches.id"), nullable=False)
    player_id: Mapped[str | None] = mapped_column(ForeignKey("players.id"), nullable=True)
    team_color: Mapped[str] = mapped_column(String(20), nullable=False)
    minute: Mapped[int] = mapped_column(Integer, default=0)
    is_own_goal: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    __table_args__ = (Index("ix_goals_player_id", "player_id"),)


class AssistRow(Base):
    __tablename__ = "assists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    goal_id: Mapped[str] = mapped_column(ForeignKey("goals.id"), nullable=False, unique=True)
    player_id: Mapped[str | None] = mapped_column(ForeignKey("players.id"), nullable=True)

    __table_args__ = (Index("ix_assists_player_id", "player_id"),)


class PunishmentRow(Base):
    """Point deduction applied to a player for a round. ``points`` is signed."""

    __tablename__ = "punishments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    round_id: Mapped[str] = mapped_column(ForeignKey("rounds.id"), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC))

    __table_args__ = (Index("ix_punishments_player_id", "player_id"),)


class PlayerStatsSnapshotRow(Base):
    """Cumulative totals for one player as of ``updated_at``.

    Refreshed by an out-of-band batch job. Assumed equal to a full
    recomputation over everything dated at or before ``updated_at``.
    """

    __tablename__ = "player_stats_snapshots"

    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), primary_key=True)
    presences: Mapped[int] = mapped_column(Integer, default=0)
    goals: Mapped[int] = mapped_column(Integer, default=0)
    assists: Mapped[int] = mapped_column(Integer, default=0)
    wins: Mapped[int] = mapped_column(Integer, default=0)
    draws: Mapped[int] = mapped_column(Integer, default=0)
    losses: Mapped[int] = mapped_column(Integer, default=0)
    yellow_cards: Mapped[int] = mapped_column(Integer, default=0)
    blue_cards: Mapped[int] = mapped_column(Integer, default=0)
    penalties: Mapped[int] = mapped_column(Integer, default=0)
    total_points: Mapped[int] = mapped_column(Integer, default=0)
    matches: Mapped[int] = mapped_column(Integer, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
