"""Shared test fixtures."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from scoreline.config import Settings
from scoreline.db.engine import create_engine, create_tables, get_session
from scoreline.db.repository import Repository


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(scoreline_env="development", database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    """File-backed SQLite engine with all tables.

    A stats request opens several sessions concurrently; an in-memory
    database would give each connection its own empty database, so tests
    use a temporary file instead.
    """
    eng = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'scoreline-test.db'}")
    await create_tables(eng)
    yield eng
    await eng.dispose()


class LeagueSeeder:
    """Plays the part of the external writers. Every call commits immediately."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._match_for_round: dict[str, str] = {}
        self._round_counter = 0

    async def player(self, name: str = "Ana") -> str:
        async with get_session(self.engine) as session:
            row = await Repository(session).create_player(name)
            return row.id

    async def round(
        self,
        day: date | None,
        player_id: str | None = None,
        round_number: int | None = None,
        **stats: int,
    ) -> str:
        """Create a round (with one match) and optionally the player's row for it."""
        if round_number is None:
            self._round_counter += 1
            round_number = self._round_counter
        async with get_session(self.engine) as session:
            repo = Repository(session)
            rnd = await repo.create_round(round_number, day)
            match = await repo.create_match(rnd.id)
            self._match_for_round[rnd.id] = match.id
            if player_id is not None:
                await repo.record_round_stats(player_id, rnd.id, **stats)
            return rnd.id

    async def participation(self, player_id: str, round_id: str, **stats: int) -> None:
        async with get_session(self.engine) as session:
            await Repository(session).record_round_stats(player_id, round_id, **stats)

    async def goal(
        self,
        round_id: str,
        player_id: str | None,
        own_goal: bool = False,
        assist_by: str | None = None,
    ) -> str:
        async with get_session(self.engine) as session:
            row = await Repository(session).record_goal(
                self._match_for_round[round_id],
                player_id,
                is_own_goal=own_goal,
                assist_player_id=assist_by,
            )
            return row.id

    async def punishment(self, player_id: str, round_id: str, points: int) -> None:
        async with get_session(self.engine) as session:
            await Repository(session).record_punishment(player_id, round_id, points, "late")

    async def snapshot(self, player_id: str, updated_at: datetime, **totals: int) -> None:
        async with get_session(self.engine) as session:
            await Repository(session).store_stats_snapshot(player_id, updated_at, **totals)


@pytest.fixture
def seeder(engine: AsyncEngine) -> LeagueSeeder:
    return LeagueSeeder(engine)
