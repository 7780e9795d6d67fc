"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    candidate_pool_limit: int = 10
    next_battle_delay_seconds: float = 1.0
    leaderboard_limit: int = 20
    session_idle_timeout_seconds: float = 1800.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def show_debug_errors(self) -> bool:
        """Return true when user-facing errors may carry debug detail."""
        return self.environment == "local"
