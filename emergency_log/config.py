"""Application settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the emergency event log, read from ``EMERGENCY_LOG_*``."""

    model_config = SettingsConfigDict(env_prefix="EMERGENCY_LOG_", extra="ignore")

    DATABASE_PATH: str = "events.db"

    # None means a stalled store call waits forever.
    STORE_TIMEOUT_SECONDS: float | None = None

    # Re-read the affected row after insert/update instead of building the
    # mirror entry from the draft fields.
    REFETCH_AFTER_WRITE: bool = False

    LOG_LEVEL: str = "INFO"

    ABOUT_TEXT: str = (
        "Emergency event log: record incidents with a title, description, "
        "date and photo, stored locally on this device."
    )

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.DATABASE_PATH}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
