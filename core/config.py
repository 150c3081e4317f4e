"""
Application settings for the quote notification backend.

All values can be overridden through environment variables prefixed with
``QN_`` (e.g. ``QN_MAX_PAGE_SIZE=50``) or through a ``.env`` file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="QN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = Field(default="Quote Notifications", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Quote lifecycle
    accepted_status: str = Field(
        default="aceito",
        description="Quote status that triggers notification generation",
    )

    # Pagination
    default_page_size: int = Field(default=10, ge=1, description="Page size when none/invalid is given")
    max_page_size: int = Field(default=100, ge=1, description="Upper bound for requested page sizes")

    # Look-ahead windows (days)
    active_window_days: int = Field(default=60, ge=0, description="Default window for active listing")
    upcoming_window_days: int = Field(default=30, ge=0, description="Default window for upcoming listing")
    summary_active_window_days: int = Field(default=10, ge=0, description="Active window used by the summary")
    summary_upcoming_window_days: int = Field(default=30, ge=0, description="Upcoming window used by the summary")

    # Fixtures
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="Directory with JSON seed fixtures")
    seed_on_startup: bool = Field(default=True, description="Load JSON fixtures when the API starts")


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
