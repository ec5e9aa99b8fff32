"""
Per-file reader/writer locks.

A LockRegistry hands out one ReadWriteLock per resolved filename, created
lazily the first time that file is touched. Each cache instance owns its
own registry, so two caches in the same process never contend with each
other.

Locks are in-process only. They do not coordinate with other processes
sharing the same directory.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator


class ReadWriteLock:
    """Shared/exclusive lock built on a condition variable.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so a steady stream of reads
    cannot starve a write. Not reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a matching acquire")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without a matching acquire")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Generator[None, None, None]:
        """Hold the lock in shared mode for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Generator[None, None, None]:
        """Hold the lock in exclusive mode for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        """Number of readers currently holding the lock."""
        with self._cond:
            return self._readers

    @property
    def write_held(self) -> bool:
        """Whether a writer currently holds the lock."""
        with self._cond:
            return self._writer


class LockRegistry:
    """Lazily populated map of filename -> ReadWriteLock.

    The registry only grows: a lock, once created, is reused for every later
    operation on the same filename. The set of locks is therefore bounded by
    the set of files this instance has touched.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, ReadWriteLock] = {}

    def lock_for(self, filename: Path | str) -> ReadWriteLock:
        """Get (or create) the lock guarding ``filename``."""
        name = str(filename)
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = ReadWriteLock()
                self._locks[name] = lock
            return lock

    @contextmanager
    def read(self, filename: Path | str) -> Generator[None, None, None]:
        """Shared access to ``filename``."""
        with self.lock_for(filename).read_locked():
            yield

    @contextmanager
    def write(self, filename: Path | str) -> Generator[None, None, None]:
        """Exclusive access to ``filename``."""
        with self.lock_for(filename).write_locked():
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def __contains__(self, filename: object) -> bool:
        with self._guard:
            return str(filename) in self._locks
