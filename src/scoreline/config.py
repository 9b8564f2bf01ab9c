"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Scoreline application configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Database
    database_url: str = "sqlite+aiosqlite:///scoreline.db"

    # Environment
    scoreline_env: str = "development"

    # League calendar: decides "today" and therefore the current year
    scoreline_timezone: str = "UTC"

    # Logging
    scoreline_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_timezone(self) -> Settings:
        """Reject unknown IANA zone names at startup rather than per request."""
        try:
            ZoneInfo(self.scoreline_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"SCORELINE_TIMEZONE is not a known IANA zone: {self.scoreline_timezone!r}"
            raise ValueError(msg) from exc
        return self

    def today(self) -> date:
        """Return the current calendar date in the league's timezone."""
        return datetime.now(ZoneInfo(self.scoreline_timezone)).date()
