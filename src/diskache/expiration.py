"""
Expiration table for lazy TTL handling.

The table is one JSON object mapping plain-text keys to absolute expiry
timestamps in milliseconds since the epoch, with 0 meaning "never expires".
It is stored as a single reserved file in the cache directory and is read
and written whole; there is no per-key metadata file.

Expiry is lazy. Nothing sweeps the table in the background; a key is only
checked when it is read.
"""

from __future__ import annotations

from pathlib import Path

import orjson

from diskache.exceptions import ExpirationTableError
from diskache.locks import LockRegistry
from diskache.logging import get_logger
from diskache.types import NEVER_EXPIRES, now_millis

logger = get_logger(__name__)


class ExpirationTable:
    """Read-modify-write access to the expiration table file.

    The table shares its owner's LockRegistry, so it is locked exactly like
    an ordinary entry: lookups take the shared lock, updates the exclusive
    one. An update holds the exclusive lock across the whole
    read-decode-mutate-write cycle, which keeps concurrent updates for
    different keys from overwriting each other.
    """

    def __init__(self, path: Path, locks: LockRegistry) -> None:
        self.path = path
        self._locks = locks

    def _load(self, key: str | None, *, strict: bool) -> dict[str, int] | None:
        """Read and decode the table. Caller must hold the table lock.

        A missing file is an empty table. Any other read error raises
        ExpirationTableError. A file that does not decode to a JSON object
        raises in strict mode and returns None otherwise.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise ExpirationTableError(
                "Could not read expiration table",
                context={"path": str(self.path), "key": key, "error": str(exc)},
            ) from exc

        try:
            table = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            if strict:
                raise ExpirationTableError(
                    "Expiration table is not valid JSON",
                    context={"path": str(self.path), "key": key},
                ) from exc
            logger.warning("Ignoring undecodable expiration table", path=str(self.path))
            return None

        if not isinstance(table, dict):
            if strict:
                raise ExpirationTableError(
                    "Expiration table is not a JSON object",
                    context={"path": str(self.path), "key": key},
                )
            logger.warning("Ignoring malformed expiration table", path=str(self.path))
            return None
        return table

    def lookup(self, key: str) -> int | None:
        """Return the recorded expiry of ``key``, or None if it has no entry.

        An undecodable table counts as "no entry".

        Raises:
            ExpirationTableError: If the table file exists but cannot be read.
        """
        with self._locks.read(self.path):
            table = self._load(key, strict=False)
        if table is None:
            return None
        value = table.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def is_expired(self, key: str) -> bool:
        """Whether ``key`` has a recorded expiry that has passed.

        Keys without an entry and keys recorded as 0 never expire.

        Raises:
            ExpirationTableError: If the table file exists but cannot be read.
        """
        expires_at = self.lookup(key)
        if expires_at is None or expires_at == NEVER_EXPIRES:
            return False
        return now_millis() >= expires_at

    def update(self, key: str, expires_at: int) -> None:
        """Record ``expires_at`` for ``key``.

        Raises:
            ExpirationTableError: If the existing table cannot be read or decoded.
            OSError: If the new table cannot be written.
        """
        with self._locks.write(self.path):
            table = self._load(key, strict=True) or {}
            table[key] = expires_at
            with open(self.path, "wb") as fh:
                fh.write(orjson.dumps(table))
        logger.debug("Updated expiration table", key=key, expires_at=expires_at)

    def expire_in(self, key: str, ttl_ms: int) -> int:
        """Record an expiry ``ttl_ms`` from now and return the timestamp."""
        expires_at = now_millis() + ttl_ms
        self.update(key, expires_at)
        return expires_at

    def mark_never_expires(self, key: str) -> None:
        self.update(key, NEVER_EXPIRES)

    def snapshot(self) -> dict[str, int]:
        """Copy of the whole table; empty if missing or undecodable."""
        with self._locks.read(self.path):
            table = self._load(None, strict=False)
        return dict(table or {})
