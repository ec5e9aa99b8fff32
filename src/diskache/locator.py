"""
Key locator: maps arbitrary string keys to files inside a cache directory.

Keys are never used as filenames directly. The SHA-256 digest of the key's
UTF-8 bytes is, so empty keys and keys containing separators or other
path-unsafe characters all resolve to a safe, fixed-length name.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

# Reserved filename of the expiration table. It contains characters that a
# lowercase hex digest never does, so no user key can resolve to it.
EXPIRATION_TABLE_FILENAME = "expired-table.json"


def digest_key(key: str | bytes) -> str:
    """Return the lowercase hex SHA-256 digest of a key."""
    raw = key if isinstance(key, bytes) else key.encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


def resolve_path(directory: Path, key: str | bytes) -> Path:
    """Resolve the storage path of a key inside ``directory``."""
    return directory / digest_key(key)


def expiration_table_path(directory: Path) -> Path:
    """Path of the expiration table inside ``directory``."""
    return directory / EXPIRATION_TABLE_FILENAME
