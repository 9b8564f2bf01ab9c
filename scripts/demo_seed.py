"""Seed a Scoreline league with two seasons of weekly rounds and print player stats.

Usage:
    python scripts/demo_seed.py seed                    # Players, rounds, events, snapshots
    python scripts/demo_seed.py stats NAME [YEAR [MONTH]]  # Print a player's profile stats
    python scripts/demo_seed.py players                 # List seeded players

Uses a local SQLite database (demo_scoreline.db).
"""

from __future__ import annotations

import asyncio
import os
import random
import sys
from datetime import UTC, date, datetime, timedelta

from sqlalchemy import select

from scoreline.core.event_range import EventRange, fetch_event_range
from scoreline.core.profile_stats import compute_profile_stats
from scoreline.core.totals import fold_events
from scoreline.db.engine import create_engine, create_tables, get_session
from scoreline.db.models import PlayerRow
from scoreline.db.repository import Repository

DEMO_DB = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///demo_scoreline.db")

PLAYERS = [
    ("Bruno Lage", "gold", "forward"),
    ("Caio Ramos", "silver", "midfielder"),
    ("Davi Souza", "bronze", "defender"),
    ("Enzo Prado", "silver", "forward"),
    ("Fabio Nunes", "gold", "goalkeeper"),
    ("Gil Teixeira", "bronze", "midfielder"),
    ("Hugo Meireles", "silver", "defender"),
    ("Igor Batista", "bronze", "forward"),
]

TEAM_COLORS = ["white", "green", "black", "orange"]


def _saturdays(start: date, count: int) -> list[date]:
    offset = (5 - start.weekday()) % 7
    first = start + timedelta(days=offset)
    return [first + timedelta(weeks=i) for i in range(count)]


def _through(events: EventRange, last_day: date) -> EventRange:
    """Rows dated on or before *last_day*: what a snapshot taken then covers."""
    return EventRange(
        participations=tuple(p for p in events.participations if p.round_date <= last_day),
        goals=tuple(g for g in events.goals if g.round_date <= last_day),
        assists=tuple(a for a in events.assists if a.round_date <= last_day),
        penalties=tuple(p for p in events.penalties if p.round_date <= last_day),
    )


async def seed(seed_value: int = 7):
    """Create players, ~two seasons of rounds, and a snapshot taken a few weeks ago."""
    rng = random.Random(seed_value)
    today = date.today()
    engine = create_engine(DEMO_DB)
    await create_tables(engine)

    async with get_session(engine) as session:
        repo = Repository(session)
        player_ids = [
            (await repo.create_player(name, level=level, position=position)).id
            for name, level, position in PLAYERS
        ]

        days = [d for d in _saturdays(date(today.year - 1, 1, 1), 100) if d <= today]
        for number, day in enumerate(days, start=1):
            rnd = await repo.create_round(number, day)
            for match_number in range(1, 4):
                home, away = rng.sample(TEAM_COLORS, 2)
                match = await repo.create_match(rnd.id, match_number, home, away)
                for _ in range(rng.randint(0, 4)):
                    scorer, passer = rng.sample(player_ids, 2)
                    await repo.record_goal(
                        match.id,
                        scorer,
                        team_color=home,
                        minute=rng.randint(1, 20),
                        is_own_goal=rng.random() < 0.05,
                        assist_player_id=passer if rng.random() < 0.6 else None,
                    )

            for pid in player_ids:
                if rng.random() < 0.15:
                    continue  # absent
                results = [rng.choice("WDL") for _ in range(3)]
                wins, draws, losses = (results.count(c) for c in "WDL")
                await repo.record_round_stats(
                    pid,
                    rnd.id,
                    victories=wins,
                    draws=draws,
                    defeats=losses,
                    yellow_cards=int(rng.random() < 0.1),
                    blue_cards=int(rng.random() < 0.03),
                    presence_points=1,
                    total_points=1 + 3 * wins + draws,
                )
                if rng.random() < 0.05:
                    await repo.record_punishment(pid, rnd.id, -rng.randint(1, 3), "late arrival")

        print(f"Seeded {len(player_ids)} players and {len(days)} rounds")

    # Snapshot as of three weeks ago, the way the nightly job would have left it.
    cutoff = datetime.combine(today - timedelta(weeks=3), datetime.min.time(), tzinfo=UTC)
    for pid in player_ids:
        events = await fetch_event_range(engine, pid)
        totals = fold_events(_through(events, cutoff.date()))
        async with get_session(engine) as session:
            await Repository(session).store_stats_snapshot(pid, cutoff, **totals.model_dump())
    print(f"Snapshots stored as of {cutoff.date().isoformat()}")

    await engine.dispose()


async def players():
    """List seeded players."""
    engine = create_engine(DEMO_DB)
    async with get_session(engine) as session:
        result = await session.execute(select(PlayerRow).order_by(PlayerRow.name))
        for row in result.scalars():
            print(f"  {row.name:<16} {row.level:<7} {row.position:<11} {row.id}")
    await engine.dispose()


async def stats(name: str, year: int | None = None, month: int | None = None):
    """Print a player's totals, ratios and best/worst periods."""
    engine = create_engine(DEMO_DB)
    async with get_session(engine) as session:
        result = await session.execute(select(PlayerRow).where(PlayerRow.name == name))
        player = result.scalar_one_or_none()
    if not player:
        print(f"No player named {name!r}. Run 'players' to list them.")
        await engine.dispose()
        return

    profile = await compute_profile_stats(engine, player.id, year=year, month=month)
    t = profile.totals
    print(f"{player.name} | year={year or 'all'} month={month or 'all'} | mode={profile.mode}")
    print(f"Years: {', '.join(profile.available_years)}")
    print(
        f"P {t.presences}  M {t.matches}  W {t.wins}  D {t.draws}  L {t.losses}  "
        f"G {t.goals}  A {t.assists}  YC {t.yellow_cards}  BC {t.blue_cards}  "
        f"Pen {t.penalties}  Pts {t.total_points}"
    )
    r = profile.ratios
    print(
        f"G/M {r.goals_per_match:.2f}  A/M {r.assists_per_match:.2f}  "
        f"Inv {r.involvement_pct:.1f}%  Win {r.win_rate_pct:.1f}%"
    )
    periods = profile.best_worst_periods
    if periods:
        print(f"Best round:  {periods.best_round.period} ({periods.best_round.points} pts)")
        print(f"Worst round: {periods.worst_round.period} ({periods.worst_round.points} pts)")
        if periods.best_month and periods.worst_month:
            print(f"Best month:  {periods.best_month.period} ({periods.best_month.points} pts)")
            print(f"Worst month: {periods.worst_month.period} ({periods.worst_month.points} pts)")

    await engine.dispose()


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    cmd = sys.argv[1]
    if cmd == "seed":
        asyncio.run(seed())
    elif cmd == "players":
        asyncio.run(players())
    elif cmd == "stats":
        if len(sys.argv) < 3:
            print("Usage: demo_seed.py stats NAME [YEAR [MONTH]]")
            return
        year = int(sys.argv[3]) if len(sys.argv) > 3 else None
        month = int(sys.argv[4]) if len(sys.argv) > 4 else None
        asyncio.run(stats(sys.argv[2], year, month))
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)


if __name__ == "__main__":
    main()
