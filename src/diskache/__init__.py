"""
diskache: a persistent key-value cache storing one file per entry,
with optional per-key time-to-live.
"""

from __future__ import annotations

from diskache.cache import Diskache
from diskache.exceptions import (
    CacheDirectoryError,
    ConfigurationError,
    DiskacheError,
    ExpirationTableError,
)
from diskache.types import CacheStats

__version__ = "0.1.0"

__all__ = [
    "CacheDirectoryError",
    "CacheStats",
    "ConfigurationError",
    "Diskache",
    "DiskacheError",
    "ExpirationTableError",
    "__version__",
]
