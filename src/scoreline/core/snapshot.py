"""Read a player's cached aggregate snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from scoreline.core.delta import as_utc
from scoreline.db.repository import Repository
from scoreline.models.stats import STAT_FIELDS, StatTotals


@dataclass(frozen=True)
class Snapshot:
    totals: StatTotals
    updated_at: datetime


async def read_snapshot(repo: Repository, player_id: str) -> Snapshot | None:
    """Return the player's snapshot, or None if the batch job has never covered them.

    A missing snapshot is a normal state (new player) and means an all-zero base.
    """
    row = await repo.get_stats_snapshot(player_id)
    if row is None:
        return None
    totals = StatTotals(**{name: getattr(row, name) or 0 for name in STAT_FIELDS})
    return Snapshot(totals=totals, updated_at=as_utc(row.updated_at))
