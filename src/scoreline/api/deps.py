"""Request dependencies: the app's engine and settings, and a repository per request."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from scoreline.config import Settings
from scoreline.db import engine as db
from scoreline.db.repository import Repository


async def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_session(
    engine: Annotated[AsyncEngine, Depends(get_engine)],
) -> AsyncGenerator[AsyncSession, None]:
    """One session per request, committed when the handler returns."""
    async with db.get_session(engine) as session:
        yield session


async def get_repo(session: Annotated[AsyncSession, Depends(get_session)]) -> Repository:
    return Repository(session)


EngineDep = Annotated[AsyncEngine, Depends(get_engine)]
RepoDep = Annotated[Repository, Depends(get_repo)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
