"""SHA-1 digests used for the MESSAGE-INTEGRITY attribute."""

from __future__ import annotations

import hashlib

__all__ = ["sha1", "DIGEST_SIZE"]

DIGEST_SIZE = 20


def sha1(data: bytes | bytearray | memoryview | str) -> bytes:
    """Return the 20-byte SHA-1 digest of ``data``; text is hashed as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha1(bytes(data), usedforsecurity=False).digest()