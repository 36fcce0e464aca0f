"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Interview Console"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # Remote mock-interview API
    api_base_url: str = "https://mockinterview-backend.futurense.com"
    request_timeout_seconds: float = 30.0

    # List views
    filter_debounce_ms: int = 300
    students_page_size: int = 8
    sessions_page_size: int = 10
    leaderboard_page_size: int = 10
    analytics_days: int = 14

    # Interview flow
    feedback_poll_interval_seconds: float = 7.0

    # Toast notifications
    toast_auto_close_ms: int = 1000
    toast_limit: int = 4

    # Durable storage for the student session object
    storage_path: str = ".interview_console/local_storage.json"

    # CORS - stored as comma-separated string in env
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def filter_debounce_seconds(self) -> float:
        return self.filter_debounce_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
