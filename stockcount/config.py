from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Stock Count"
    ENVIRONMENT: str = "local"

    # ==============================
    # Remote store (Supabase / PostgREST)
    # ==============================
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    REMOTE_TIMEOUT_SECONDS: float = 15.0
    # Upper bound for an optimistic add/delete before it is reverted.
    OPTIMISTIC_TIMEOUT_SECONDS: float = 20.0

    # ==============================
    # Export
    # ==============================
    EXPORT_DATE_FORMAT: str = "%d/%m/%Y, %H:%M:%S"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
