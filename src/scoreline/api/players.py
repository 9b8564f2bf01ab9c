"""Player statistics API endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from scoreline.api.deps import EngineDep, RepoDep, SettingsDep
from scoreline.core.profile_stats import FetchFailure, compute_profile_stats
from scoreline.core.years import load_available_years

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/players", tags=["players"])


@router.get("/{player_id}/stats")
async def get_player_stats(
    player_id: str,
    repo: RepoDep,
    engine: EngineDep,
    settings: SettingsDep,
    year: Annotated[int | None, Query(ge=1)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
) -> dict:
    """Totals, per-round series and analytics for a player.

    Without filters (or with the current year) totals come from the cached
    snapshot plus newer events; past years and single months are recomputed.
    """
    player = await repo.get_player(player_id)
    if not player:
        raise HTTPException(404, "Player not found")

    try:
        stats = await compute_profile_stats(
            engine, player_id, year=year, month=month, today=settings.today()
        )
    except FetchFailure:
        logger.exception("player_stats_unavailable player=%s", player_id)
        raise HTTPException(503, "Statistics temporarily unavailable") from None

    return {"data": stats.model_dump(mode="json", by_alias=True)}


@router.get("/{player_id}/years")
async def get_player_years(
    player_id: str,
    repo: RepoDep,
    engine: EngineDep,
    settings: SettingsDep,
) -> dict:
    """Years with recorded history, newest first, for the year filter."""
    player = await repo.get_player(player_id)
    if not player:
        raise HTTPException(404, "Player not found")
    years = await load_available_years(engine, player_id, settings.today())
    return {"data": years}
