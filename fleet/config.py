"""
Application configuration using Pydantic-Settings.
All settings can be overridden via SENTINEL_* environment variables or .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SENTINEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ───────────────────────────────────────────────────────────
    DATA_FILE: str = "fleet.yaml"
    ALARMS_FILE: str = "alarms.yaml"

    # ── Daily sweep ───────────────────────────────────────────────────────
    SWEEP_CRON: str = "0 9 * * *"  # every day at 09:00
    TIMEZONE: str = "Asia/Kuala_Lumpur"

    # ── Rules ─────────────────────────────────────────────────────────────
    ZERO_MILEAGE_IS_VALID: bool = False

    # ── Web ───────────────────────────────────────────────────────────────
    SECRET_KEY: str = "dev-secret-key-change-in-prod"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    return Settings()
