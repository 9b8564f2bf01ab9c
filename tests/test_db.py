"""Tests for database layer: engine, ORM models, repository reads."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from scoreline.db.engine import get_session
from scoreline.db.models import PlayerRow
from scoreline.db.repository import Repository, read_with


class TestTableCreation:
    async def test_all_tables_created(self, engine: AsyncEngine):
        async with engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: sync_conn.dialect.get_table_names(sync_conn)
            )
        expected = {
            "players",
            "rounds",
            "matches",
            "player_round_stats",
            "goals",
            "assists",
            "punishments",
            "player_stats_snapshots",
        }
        assert expected.issubset(set(tables))


class TestRoundStatsQuery:
    async def test_joined_to_round_and_ordered(self, engine, seeder):
        player = await seeder.player()
        await seeder.round(date(2024, 3, 9), player, round_number=2, victories=1, total_points=5)
        await seeder.round(date(2024, 3, 2), player, round_number=1, defeats=1, total_points=1)

        rows = await read_with(engine, lambda repo: repo.get_round_stats_for_player(player))
        assert [rnd.round_number for _, rnd in rows] == [1, 2]
        assert [stats.total_points for stats, _ in rows] == [1, 5]

    async def test_year_scope(self, engine, seeder):
        player = await seeder.player()
        await seeder.round(date(2023, 12, 30), player)
        await seeder.round(date(2024, 1, 6), player)
        await seeder.round(date(2024, 12, 28), player)
        await seeder.round(date(2025, 1, 4), player)

        rows = await read_with(engine, lambda repo: repo.get_round_stats_for_player(player, 2024))
        assert [rnd.scheduled_date for _, rnd in rows] == [date(2024, 1, 6), date(2024, 12, 28)]

    async def test_undated_rounds_excluded(self, engine, seeder):
        player = await seeder.player()
        await seeder.round(None, player)
        await seeder.round(date(2024, 1, 6), player)

        rows = await read_with(engine, lambda repo: repo.get_round_stats_for_player(player))
        assert len(rows) == 1

    async def test_other_players_excluded(self, engine, seeder):
        ana = await seeder.player("Ana")
        bia = await seeder.player("Bia")
        rnd = await seeder.round(date(2024, 1, 6), ana)
        await seeder.participation(bia, rnd)

        rows = await read_with(engine, lambda repo: repo.get_round_stats_for_player(ana))
        assert len(rows) == 1

    async def test_last_representable_year(self, engine, seeder):
        player = await seeder.player()
        await seeder.round(date(9999, 12, 31), player)
        await seeder.round(date(2024, 1, 6), player)

        rows = await read_with(engine, lambda repo: repo.get_round_stats_for_player(player, 9999))
        assert [rnd.scheduled_date for _, rnd in rows] == [date(9999, 12, 31)]


class TestEventQueries:
    async def test_goals_exclude_own_goals(self, engine, seeder):
        player = await seeder.player()
        rnd = await seeder.round(date(2024, 2, 3), player)
        await seeder.goal(rnd, player)
        await seeder.goal(rnd, player)
        await seeder.goal(rnd, player, own_goal=True)

        rows = await read_with(engine, lambda repo: repo.get_goals_for_player(player))
        assert len(rows) == 2
        assert all(day == date(2024, 2, 3) for _, day in rows)

    async def test_assists_joined_through_goal(self, engine, seeder):
        scorer = await seeder.player("Scorer")
        passer = await seeder.player("Passer")
        rnd = await seeder.round(date(2024, 2, 3), scorer)
        await seeder.goal(rnd, scorer, assist_by=passer)
        await seeder.goal(rnd, scorer)

        rows = await read_with(engine, lambda repo: repo.get_assists_for_player(passer))
        assert [day for _, day in rows] == [date(2024, 2, 3)]
        assert await read_with(engine, lambda repo: repo.get_assists_for_player(scorer)) == []

    async def test_punishments_year_scoped(self, engine, seeder):
        player = await seeder.player()
        old = await seeder.round(date(2023, 2, 4), player)
        new = await seeder.round(date(2024, 2, 3), player)
        await seeder.punishment(player, old, -2)
        await seeder.punishment(player, new, -3)

        rows = await read_with(engine, lambda repo: repo.get_punishments_for_player(player, 2024))
        assert len(rows) == 1
        _, round_id, day, points = rows[0]
        assert round_id == new
        assert day == date(2024, 2, 3)
        assert points == -3

    async def test_round_dates(self, engine, seeder):
        player = await seeder.player()
        await seeder.round(date(2022, 5, 7), player)
        await seeder.round(None, player)

        dates = await read_with(engine, lambda repo: repo.get_round_dates_for_player(player))
        assert dates == [date(2022, 5, 7)]


class TestSnapshot:
    async def test_missing_snapshot_is_none(self, engine, seeder):
        player = await seeder.player()
        assert await read_with(engine, lambda repo: repo.get_stats_snapshot(player)) is None

    async def test_store_replaces_existing(self, engine, seeder):
        player = await seeder.player()
        await seeder.snapshot(player, datetime(2024, 5, 1, tzinfo=UTC), total_points=50)
        await seeder.snapshot(player, datetime(2024, 6, 1, tzinfo=UTC), total_points=80)

        row = await read_with(engine, lambda repo: repo.get_stats_snapshot(player))
        assert row.total_points == 80
        assert row.updated_at.replace(tzinfo=None) == datetime(2024, 6, 1)

    async def test_aware_timestamp_stored_as_utc(self, engine, seeder):
        player = await seeder.player()
        brasilia = timezone(timedelta(hours=-3))
        await seeder.snapshot(player, datetime(2024, 6, 1, 23, 0, tzinfo=brasilia))

        row = await read_with(engine, lambda repo: repo.get_stats_snapshot(player))
        assert row.updated_at.replace(tzinfo=None) == datetime(2024, 6, 2, 2, 0)


class TestSession:
    async def test_rollback_on_error(self, engine):
        with pytest.raises(RuntimeError):
            async with get_session(engine) as session:
                await Repository(session).create_player("Ghost")
                raise RuntimeError("boom")

        async with get_session(engine) as session:
            result = await session.execute(select(PlayerRow).where(PlayerRow.name == "Ghost"))
            assert result.scalar_one_or_none() is None
