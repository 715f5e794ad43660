"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from caffeine_tracker.domain.intake import REFRESH_INTERVAL_SECONDS

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    display_timezone: str = "UTC"
    refresh_interval_seconds: float = REFRESH_INTERVAL_SECONDS
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase(self) -> bool:
        """Return True when Supabase credentials are configured."""
        return bool(self.supabase_url and self.supabase_service_key)
