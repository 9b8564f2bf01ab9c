"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from scoreline.api.players import router as players_router
from scoreline.config import Settings
from scoreline.db.engine import create_engine, create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: create engine and any missing tables. Shutdown: dispose engine."""
    settings: Settings = app.state.settings
    engine = create_engine(settings.database_url)
    await create_tables(engine)
    app.state.engine = engine
    logger.info("scoreline_started env=%s tz=%s", settings.scoreline_env, settings.scoreline_timezone)

    yield

    await engine.dispose()
    logger.info("scoreline_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the Scoreline FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.scoreline_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Scoreline",
        version="0.1.0",
        description="Player statistics for a weekly team-sports league",
        docs_url="/docs" if settings.scoreline_env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(players_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.scoreline_env}

    return app


app = create_app()
