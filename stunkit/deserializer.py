"""Big-endian reader over a received datagram."""

from __future__ import annotations

__all__ = ["DeserializerError", "Deserializer"]


class DeserializerError(ValueError):
    """Raised when reading past the end of the data."""


class Deserializer:
    """Reads big-endian values from a byte sequence, front to back."""

    def __init__(self, raw_data: bytes | bytearray | list[int]) -> None:
        self._data = bytes(raw_data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._pos

    @property
    def remaining(self) -> int:
        """Number of bytes not yet consumed."""
        return len(self._data) - self._pos

    def has_data(self) -> bool:
        """Return True while unread bytes remain."""
        return self._pos < len(self._data)

    def _check(self, count: int) -> None:
        if count < 0 or self._pos + count > len(self._data):
            raise DeserializerError(
                f"Cannot read {count} bytes: only {self.remaining} left"
            )

    def _take(self, count: int) -> bytes:
        self._check(count)
        chunk = self._data[self._pos:self._pos + count]
        self._pos += count
        return chunk

    def pop(self, count: int) -> None:
        """Skip ``count`` bytes."""
        self._check(count)
        self._pos += count

    def peek_u16(self) -> int:
        """Return the next 16-bit value without consuming it."""
        self._check(2)
        return int.from_bytes(self._data[self._pos:self._pos + 2], "big")

    def get_u8(self) -> int:
        """Read one unsigned byte."""
        return self._take(1)[0]

    def get_u16(self) -> int:
        """Read an unsigned 16-bit big-endian integer."""
        return int.from_bytes(self._take(2), "big")

    def get_u32(self) -> int:
        """Read an unsigned 32-bit big-endian integer."""
        return int.from_bytes(self._take(4), "big")

    def get_u64(self) -> int:
        """Read an unsigned 64-bit big-endian integer."""
        return int.from_bytes(self._take(8), "big")

    def get_bytes(self, count: int) -> bytes:
        """Read ``count`` raw bytes."""
        if count == 0:
            return b""
        return self._take(count)

    def get_string(self, size: int) -> str:
        """Read ``size`` bytes as text, dropping trailing NUL padding."""
        return self.get_bytes(size).rstrip(b"\x00").decode("utf-8", errors="replace")