"""Application configuration settings."""
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GYMBO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "GymBo"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./gymbo.db"
    database_echo: bool = False

    # Session store timing (seconds)
    success_message_seconds: float = 3.0
    completed_session_linger_seconds: float = 0.5  # keeps the summary visible before the slot clears

    # History
    recent_sessions_limit: int = 10

    # Rest timer
    rest_timer_state_path: Path = Path(".gymbo") / "rest_timer_state.json"
    rest_timer_restore_window_seconds: float = 600.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
