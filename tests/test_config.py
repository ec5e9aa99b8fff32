"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from diskache.config import Settings, clear_settings_cache, get_settings


class TestSettingsLoading:
    """Tests for loading Settings from the environment."""

    def test_settings_loads_from_env(
        self, mock_env_vars: dict[str, str], cache_dir: Path
    ) -> None:
        settings = get_settings()
        assert settings.CACHE_DIR == cache_dir
        assert settings.LOG_LEVEL == "WARNING"
        assert settings.DEFAULT_TTL_MS is None

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.CACHE_DIR == Path(".diskache")
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_FILE is None
        assert settings.DEFAULT_TTL_MS is None

    def test_unprefixed_variables_ignored(self) -> None:
        """Test that only DISKACHE_-prefixed variables are read."""
        with patch.dict(os.environ, {"CACHE_DIR": "/elsewhere"}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.CACHE_DIR == Path(".diskache")

    def test_default_ttl(self) -> None:
        with patch.dict(os.environ, {"DISKACHE_DEFAULT_TTL_MS": "1500"}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.DEFAULT_TTL_MS == 1500

    def test_dotenv_file(self, temp_dir: Path) -> None:
        env_file = temp_dir / "test.env"
        env_file.write_text("DISKACHE_CACHE_DIR=/from/dotenv\nDISKACHE_LOG_LEVEL=DEBUG\n")
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=env_file)
        assert settings.CACHE_DIR == Path("/from/dotenv")
        assert settings.LOG_LEVEL == "DEBUG"


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_negative_ttl_rejected(self) -> None:
        with patch.dict(os.environ, {"DISKACHE_DEFAULT_TTL_MS": "-1"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_unknown_log_level_rejected(self) -> None:
        with patch.dict(os.environ, {"DISKACHE_LOG_LEVEL": "LOUD"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestSettingsCache:
    """Tests for the get_settings singleton."""

    def test_get_settings_is_cached(self, mock_env_vars: dict[str, str]) -> None:
        assert get_settings() is get_settings()

    def test_clear_settings_cache_reloads(self, mock_env_vars: dict[str, str]) -> None:
        first = get_settings()
        with patch.dict(os.environ, {"DISKACHE_LOG_LEVEL": "ERROR"}):
            clear_settings_cache()
            second = get_settings()
        assert first is not second
        assert second.LOG_LEVEL == "ERROR"

    def test_display(self, mock_settings: Settings, cache_dir: Path) -> None:
        shown = mock_settings.display()
        assert shown["CACHE_DIR"] == str(cache_dir)
        assert shown["LOG_FILE"] is None
