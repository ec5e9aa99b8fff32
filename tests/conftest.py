"""
Pytest configuration and fixtures for diskache tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from diskache.cache import Diskache
from diskache.config import Settings, clear_settings_cache


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def cache_dir(temp_dir: Path) -> Path:
    """Directory for a test cache (not created up front)."""
    return temp_dir / "cache"


@pytest.fixture
def cache(cache_dir: Path) -> Diskache:
    """Provide a fresh cache instance."""
    return Diskache(cache_dir)


@pytest.fixture
def mock_env_vars(cache_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock DISKACHE_* environment variables for testing."""
    env_vars = {
        "DISKACHE_CACHE_DIR": str(cache_dir),
        "DISKACHE_LOG_LEVEL": "WARNING",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        os.environ.pop("DISKACHE_DEFAULT_TTL_MS", None)
        os.environ.pop("DISKACHE_LOG_FILE", None)
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance pointing at the test cache directory."""
    from diskache.config import get_settings

    settings = get_settings()
    yield settings
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
