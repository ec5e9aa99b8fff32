"""
Custom exception hierarchy for diskache.

All exceptions inherit from DiskacheError, which provides optional context
for structured error handling and logging.

Plain filesystem failures on the data path (disk full, permissions) are not
wrapped: the underlying OSError reaches the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class DiskacheError(Exception):
    """Base exception for all diskache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(DiskacheError):
    """Raised when configuration is invalid or missing.

    Examples:
        - DISKACHE_LOG_LEVEL is not a known level
        - DISKACHE_DEFAULT_TTL_MS is negative
    """

    pass


class CacheDirectoryError(DiskacheError):
    """Raised when the cache directory cannot be created or recreated.

    Context should include:
        - directory: The directory that was being created
    """

    pass


class ExpirationTableError(DiskacheError):
    """Raised when the expiration table cannot be read or decoded.

    Context should include:
        - path: Location of the table file
        - key: The key being looked up or updated, if any
    """

    pass
