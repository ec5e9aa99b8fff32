"""
Disk-backed key-value cache with lazy TTL expiration.

Each value is stored as one file named by the SHA-256 digest of its key.
Per-file reader/writer locks serialize writers on the same key while
leaving different keys fully independent. Expiry timestamps live in a
single expiration table kept in the same directory and checked only when
a key is read.
"""

from __future__ import annotations

import shutil
import threading
from pathlib import Path

from diskache.base import CacheProtocol
from diskache.config import Settings, get_settings
from diskache.exceptions import CacheDirectoryError, ExpirationTableError
from diskache.expiration import ExpirationTable
from diskache.locator import expiration_table_path, resolve_path
from diskache.locks import LockRegistry
from diskache.logging import get_logger
from diskache.types import CacheStats

logger = get_logger(__name__)


class Diskache(CacheProtocol):
    """Persistent key-value cache storing one file per entry.

    The instance assumes it is the only owner of its directory. Locking is
    in-process; nothing coordinates with other processes using the same
    directory.
    """

    def __init__(self, directory: Path | str) -> None:
        """Open a cache, creating the directory (and parents) if needed.

        Args:
            directory: Directory holding the cache files.

        Raises:
            CacheDirectoryError: If the directory cannot be created.
        """
        self.directory = Path(directory)
        self._make_directory()

        self._locks = LockRegistry()
        self._items = 0
        self._items_lock = threading.Lock()
        self._expirations = ExpirationTable(
            expiration_table_path(self.directory), self._locks
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Diskache:
        """Open the cache configured by DISKACHE_CACHE_DIR."""
        settings = settings or get_settings()
        return cls(settings.CACHE_DIR)

    def _make_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheDirectoryError(
                "Could not create cache directory",
                context={"directory": str(self.directory), "error": str(exc)},
            ) from exc

    def _path(self, key: str) -> Path:
        return resolve_path(self.directory, key)

    @property
    def locks(self) -> LockRegistry:
        """The per-file lock registry owned by this instance."""
        return self._locks

    @property
    def expirations(self) -> ExpirationTable:
        return self._expirations

    def set(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any previous value.

        A plain set does not touch the expiration table: a key written
        earlier with a TTL keeps that TTL.

        Raises:
            OSError: If the file cannot be created or written. A failed write
                may leave a truncated file behind.
        """
        path = self._path(key)
        with self._locks.write(path):
            with open(path, "wb") as fh:
                fh.write(data)
        with self._items_lock:
            self._items += 1

    def set_expired(self, key: str, data: bytes, ttl_ms: int) -> None:
        """Store ``data`` under ``key`` and expire it ``ttl_ms`` from now.

        The data is written before the expiry is recorded. If recording the
        expiry fails the error is raised, but the data stays written with no
        new expiry (any older one is left in place).

        Raises:
            TypeError: If ``ttl_ms`` is not an int. A negative TTL is accepted
                and stores an entry that is already expired.
            OSError: If the data or the table cannot be written.
            ExpirationTableError: If the existing table cannot be read or decoded.
        """
        if isinstance(ttl_ms, bool) or not isinstance(ttl_ms, int):
            raise TypeError(f"ttl_ms must be an int, got {type(ttl_ms).__name__}")

        self.set(key, data)
        try:
            self._expirations.expire_in(key, ttl_ms)
        except (ExpirationTableError, OSError) as exc:
            logger.error("Failed to record expiry", key=key, error=str(exc))
            raise

    def _read(self, key: str) -> bytes | None:
        path = self._path(key)
        with self._locks.read(path):
            try:
                return path.read_bytes()
            except FileNotFoundError:
                return None
            except OSError as exc:
                logger.error("Error reading cache file", key=key, error=str(exc))
                return None

    def get(self, key: str) -> bytes | None:
        """Return the value stored under ``key``.

        Returns None when the key is absent, unreadable, or expired. Reading
        an expired key resets its recorded expiry to 0 (never expires) and
        leaves the file in place, so the next get() returns the old value.
        """
        data = self._read(key)
        if data is None:
            return None

        try:
            expired = self._expirations.is_expired(key)
        except ExpirationTableError as exc:
            logger.warning("Treating key as expired", key=key, error=str(exc))
            expired = True

        if not expired:
            return data

        try:
            self._expirations.mark_never_expires(key)
        except (ExpirationTableError, OSError) as exc:
            logger.warning("Could not reset expiry", key=key, error=str(exc))
        return None

    def delete(self, key: str) -> bool:
        """Remove the file stored under ``key``.

        Takes the shared lock, so deletes do not block readers and two
        deletes of the same key may race; the loser sees the file already
        gone and still reports success. The expiration table is not touched.

        Returns:
            True if the key is gone afterwards, False if removal failed.
        """
        path = self._path(key)
        with self._locks.read(path):
            if not path.exists():
                return True
            try:
                path.unlink()
            except FileNotFoundError:
                return True
            except OSError as exc:
                logger.error("Failed to remove cache file", key=key, error=str(exc))
                return False
        return True

    def clean(self) -> None:
        """Remove every entry, the expiration table included.

        The directory is deleted and recreated. This does not take any
        per-key locks, so operations running concurrently on other threads
        may observe the directory mid-wipe.

        Raises:
            OSError: If the directory tree cannot be removed.
            CacheDirectoryError: If the directory cannot be recreated.
        """
        try:
            shutil.rmtree(self.directory)
        except FileNotFoundError:
            pass
        self._make_directory()
        logger.info("Cleaned cache directory", directory=str(self.directory))

    def stats(self) -> CacheStats:
        """Snapshot of the directory and the in-process write counter.

        The counter counts successful set() calls made by this instance,
        including the data write inside set_expired(). Writes to the expiration
        table are not counted, so a set_expired() call adds one item, not two.
        The counter is not persisted and not decremented by delete() or clean().
        """
        return CacheStats(directory=self.directory, items=self._items)

    def is_expired(self, key: str) -> bool:
        """Whether ``key`` has a recorded expiry that has already passed.

        Keys that were never given a TTL, or never set at all, are not expired.

        Raises:
            ExpirationTableError: If the table file exists but cannot be read.
        """
        return self._expirations.is_expired(key)

    def get_expired_time(self, key: str) -> int | None:
        """Recorded expiry of ``key`` in epoch milliseconds (0 = never).

        Returns None if the key has no entry in the table.
        """
        return self._expirations.lookup(key)
