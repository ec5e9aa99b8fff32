"""
Configuration management using pydantic-settings.

Loads configuration from DISKACHE_* environment variables and .env files.
Only the CLI and Diskache.from_settings() read it; the cache engine itself
takes its directory as an explicit argument.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional:
        DISKACHE_CACHE_DIR: Directory holding the cache entries
        DISKACHE_LOG_LEVEL: Logging level
        DISKACHE_LOG_FILE: JSON-lines log file
        DISKACHE_DEFAULT_TTL_MS: TTL applied by the CLI when --ttl is omitted
    """

    model_config = SettingsConfigDict(
        env_prefix="DISKACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    CACHE_DIR: Path = Field(default=Path(".diskache"), description="Cache directory")

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON-lines log file")

    DEFAULT_TTL_MS: int | None = Field(
        default=None,
        ge=0,
        description="Default time-to-live in milliseconds for CLI writes",
    )

    def display(self) -> dict[str, str | int | None]:
        """Return settings as plain values for display."""
        return {
            "CACHE_DIR": str(self.CACHE_DIR),
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
            "DEFAULT_TTL_MS": self.DEFAULT_TTL_MS,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
