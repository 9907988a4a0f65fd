"""Application configuration using pydantic-settings."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``AUTOREPAIR_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOREPAIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Any SQLAlchemy URL. "sqlite://" gives a throwaway in-memory store.
    database_url: str = "sqlite:///autorepair.db"
    db_echo: bool = False  # Set True to log all SQL statements (very verbose)
    # Seconds a writer waits on a locked database before failing
    db_busy_timeout: float = Field(default=30.0, gt=0)

    # IVA applied to order subtotals
    tax_rate: Decimal = Field(default=Decimal("0.16"), ge=0)
    # Parts are recorded on orders but, by default, not charged in the total
    include_replacements_in_cost: bool = False

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
