"""
Configuration module using pydantic-settings.

Loads settings from environment variables with sensible defaults.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="IFFL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_title: str = "IFFL Companion API"
    api_version: str = "0.1.0"
    api_description: str = "Roster ledger, trade history and trade proposals for the IFFL"
    debug: bool = False
    log_level: str = "INFO"

    # Google Sheets
    sheets_base_url: str = "https://sheets.googleapis.com/v4"
    spreadsheet_id: str = ""
    sheets_api_key: str = ""
    master_list_range: str = "2025 Master List!A2:M"
    trades_range: str = "Trades!A2:C"
    sheets_cache_ttl: int | None = None  # None keeps entries until invalidated

    # HTTP behaviour shared by every remote call
    http_timeout: float = 15.0
    retry_attempts: int = 3
    retry_min_wait: float = 0.5  # seconds
    retry_max_wait: float = 4.0  # seconds

    # Season
    current_year: str = "2025"

    # Document store
    store_backend: str = "memory"  # "memory" or "firestore"
    firestore_base_url: str = "https://firestore.googleapis.com/v1"
    firestore_project: str = ""
    firestore_database: str = "(default)"
    firestore_token: str | None = None
    firestore_poll_interval: float = 5.0

    # Notifications
    notification_relay_url: str | None = None

    # League roster (teams, colors, logos)
    league_config_path: Path | None = None

    # Message feed
    message_feed_limit: int = 50

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    cors_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the CLI and the API server."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
