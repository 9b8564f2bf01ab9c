"""Compute a player's profile statistics for one (year, month) request.

Flow for a single request:

1. Fan out: snapshot read, the four event queries, and the years query run
   concurrently, each in its own session.
2. Fan in: if any fetch fails the whole request fails with ``FetchFailure``;
   nothing partial is ever returned.
3. Synchronously: month filter, mode selection, totals, per-round series,
   ratios and best/worst periods.

``ProfileStatsView`` wraps this for a long-lived viewer (a profile screen
whose filters change over time) and guarantees only the newest request's
result is ever published.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncEngine

from scoreline.core.analytics import compute_ratios, cumulative_points, find_best_worst
from scoreline.core.event_range import fetch_event_range
from scoreline.core.reconciler import reconcile, select_mode
from scoreline.core.round_breakdown import build_round_stats
from scoreline.core.snapshot import read_snapshot
from scoreline.core.years import load_available_years
from scoreline.db.repository import read_with
from scoreline.models.stats import ProfileStats, StatsMode

logger = logging.getLogger(__name__)


class FetchFailure(Exception):
    """One of the underlying queries for a stats request failed."""

    def __init__(self, player_id: str, year: int | None, month: int | None) -> None:
        self.player_id = player_id
        self.year = year
        self.month = month
        super().__init__(f"stats fetch failed for player={player_id} year={year} month={month}")


async def compute_profile_stats(
    engine: AsyncEngine,
    player_id: str,
    year: int | None = None,
    month: int | None = None,
    today: date | None = None,
) -> ProfileStats:
    """Fetch everything for the scope concurrently, then derive the full result.

    Raises:
        FetchFailure: if any query fails. The original error is chained.
    """
    today = today or date.today()
    results = await asyncio.gather(
        read_with(engine, lambda repo: read_snapshot(repo, player_id)),
        fetch_event_range(engine, player_id, year),
        load_available_years(engine, player_id, today),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, Exception):
            raise FetchFailure(player_id, year, month) from result
        if isinstance(result, BaseException):
            raise result
    snapshot, fetched, years = results

    mode = select_mode(snapshot is not None, year, month, today.year)
    scoped = fetched.for_month(month)

    # HYBRID never has a month filter, so scoped is the full fetched set there.
    totals = reconcile(mode, snapshot, scoped)
    per_round = build_round_stats(scoped)

    logger.debug(
        "profile_stats_computed player=%s year=%s month=%s mode=%s rounds=%d",
        player_id,
        year,
        month,
        mode,
        len(per_round),
    )

    return ProfileStats(
        totals=totals,
        per_round=per_round,
        available_years=years,
        ratios=compute_ratios(totals),
        best_worst_periods=find_best_worst(per_round),
        cumulative_points=cumulative_points(per_round),
        mode=mode,
    )


class ProfileStatsView:
    """Holds the published stats for one player across filter changes.

    Every ``refresh`` takes a generation number. A result is published only
    if no newer refresh started while it was in flight, so a slow request
    for an old filter can never overwrite a newer one. A failed refresh
    leaves the last published result in place.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        player_id: str,
        today: date | None = None,
    ) -> None:
        self._engine = engine
        self._player_id = player_id
        self._today = today
        self._generation = 0
        self._result: ProfileStats | None = None
        self.is_loading = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def published(self) -> ProfileStats | None:
        """Last successfully published result, with the current loading flag."""
        if self._result is None:
            return None
        return self._result.model_copy(update={"is_loading": self.is_loading})

    @property
    def mode(self) -> StatsMode | None:
        return self._result.mode if self._result is not None else None

    async def refresh(self, year: int | None = None, month: int | None = None) -> ProfileStats | None:
        """Recompute for the given filters. Returns the result if it was published."""
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        try:
            stats = await compute_profile_stats(
                self._engine, self._player_id, year, month, today=self._today
            )
        except FetchFailure:
            logger.exception(
                "profile_stats_refresh_failed player=%s year=%s month=%s",
                self._player_id,
                year,
                month,
            )
            return None
        finally:
            # Only the latest refresh owns the loading flag.
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            logger.debug(
                "profile_stats_stale_result_dropped player=%s generation=%d latest=%d",
                self._player_id,
                generation,
                self._generation,
            )
            return None

        self._result = stats
        return stats
