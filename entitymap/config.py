"""
Mapper settings loaded from environment variables.

Uses pydantic-settings to validate and type-cast env vars on first use.
Every variable is prefixed with ``ENTITY_MAPPER_``.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised mapper configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ENTITY_MAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Mapping ───────────────────────────────────────────────────────
    strict_scalars: bool = False

    # ── Logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"


@lru_cache
def get_settings() -> Settings:
    """
    Cached singleton: settings are read once and reused.
    """
    return Settings()
