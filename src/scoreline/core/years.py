"""Years in which a player has any recorded history, for the year filter."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from sqlalchemy.ext.asyncio import AsyncEngine

from scoreline.db.repository import read_with


def available_years(round_dates: Iterable[date | None], today: date) -> list[str]:
    """Distinct years, newest first. Falls back to the current year so the
    filter always has a valid default."""
    years = {d.year for d in round_dates if d is not None}
    if not years:
        return [str(today.year)]
    return [str(y) for y in sorted(years, reverse=True)]


async def load_available_years(engine: AsyncEngine, player_id: str, today: date) -> list[str]:
    dates = await read_with(engine, lambda repo: repo.get_round_dates_for_player(player_id))
    return available_years(dates, today)
