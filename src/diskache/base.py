"""
Base interface for caches.

CacheProtocol is the minimal byte-oriented surface shared by cache
implementations: get/set/delete plus TTL-aware writes. String and JSON
helpers are layered on top of it so every implementation gets them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import orjson


class CacheProtocol(ABC):
    """Abstract interface for cache implementations."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Get a value from the cache, or None if absent or expired."""
        ...

    @abstractmethod
    def set(self, key: str, data: bytes) -> None:
        """Store a value that never expires."""
        ...

    @abstractmethod
    def set_expired(self, key: str, data: bytes, ttl_ms: int) -> None:
        """Store a value that expires ``ttl_ms`` milliseconds from now."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a value from the cache."""
        ...

    def exists(self, key: str) -> bool:
        """Check if a live (present, unexpired) value is stored under key."""
        return self.get(key) is not None

    def set_str(self, key: str, value: str) -> None:
        """Store a string as UTF-8.

        An empty string is not written at all; use set(key, b"") to cache an
        explicit empty value.
        """
        if not value:
            return
        self.set(key, value.encode("utf-8"))

    def get_str(self, key: str) -> str | None:
        data = self.get(key)
        if data is None:
            return None
        return data.decode("utf-8")

    def set_json(self, key: str, value: Any) -> None:
        """Serialize a value with orjson and store it."""
        self.set(key, orjson.dumps(value))

    def get_json(self, key: str) -> Any | None:
        """Load a JSON value stored with set_json.

        Raises:
            orjson.JSONDecodeError: If the stored bytes are not valid JSON.
        """
        data = self.get(key)
        if data is None:
            return None
        return orjson.loads(data)
