"""
Core value types for diskache.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Expiration table value meaning "never expires".
NEVER_EXPIRES = 0


def now_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class CacheStats:
    """Read-only snapshot of a cache instance."""

    directory: Path
    items: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "directory": str(self.directory),
            "items": self.items,
        }
