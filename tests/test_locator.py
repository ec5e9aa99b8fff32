"""
Tests for key-to-path resolution.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from diskache.locator import (
    EXPIRATION_TABLE_FILENAME,
    digest_key,
    expiration_table_path,
    resolve_path,
)


class TestDigestKey:
    """Tests for digest_key."""

    def test_matches_sha256_hex(self) -> None:
        """Test that the digest is the lowercase hex SHA-256 of the UTF-8 key."""
        assert digest_key("foo") == hashlib.sha256(b"foo").hexdigest()

    def test_deterministic(self) -> None:
        assert digest_key("some key") == digest_key("some key")

    def test_distinct_keys_distinct_digests(self) -> None:
        assert digest_key("a") != digest_key("b")

    def test_str_and_bytes_agree(self) -> None:
        """Test that a str key and its UTF-8 bytes resolve identically."""
        assert digest_key("héllo") == digest_key("héllo".encode("utf-8"))

    def test_empty_key(self) -> None:
        """Test that the empty key still produces a valid digest."""
        digest = digest_key("")
        assert len(digest) == 64
        assert digest == hashlib.sha256(b"").hexdigest()


class TestResolvePath:
    """Tests for resolve_path."""

    def test_joins_digest_to_directory(self, temp_dir: Path) -> None:
        path = resolve_path(temp_dir, "foo")
        assert path.parent == temp_dir
        assert path.name == digest_key("foo")

    def test_path_unsafe_keys_stay_inside_directory(self, temp_dir: Path) -> None:
        """Test that separators and traversal in keys never escape the directory."""
        for key in ["../../etc/passwd", "a/b/c", "C:\\windows", "\x00", "."]:
            path = resolve_path(temp_dir, key)
            assert path.parent == temp_dir
            assert len(path.name) == 64

    def test_no_side_effects(self, temp_dir: Path) -> None:
        """Test that resolving a path does not create anything."""
        resolve_path(temp_dir / "missing", "foo")
        assert not (temp_dir / "missing").exists()


class TestExpirationTablePath:
    """Tests for the reserved expiration table location."""

    def test_reserved_name_is_not_a_digest(self, temp_dir: Path) -> None:
        """Test that the table name can never collide with a hashed key."""
        assert expiration_table_path(temp_dir).name == EXPIRATION_TABLE_FILENAME
        assert not all(c in "0123456789abcdef" for c in EXPIRATION_TABLE_FILENAME)

    def test_user_key_with_table_name_resolves_elsewhere(self, temp_dir: Path) -> None:
        assert resolve_path(temp_dir, "expired-table") != expiration_table_path(temp_dir)
        assert resolve_path(temp_dir, EXPIRATION_TABLE_FILENAME) != expiration_table_path(
            temp_dir
        )
