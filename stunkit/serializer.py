"""Big-endian writer with the fixed capacity of a STUN datagram buffer."""

from __future__ import annotations

from typing import Any

__all__ = ["SerializerOverflowError", "Serializer"]

_CAPACITY = 1016


class SerializerOverflowError(BufferError):
    """Raised when writing would exceed the serializer's capacity."""


class Serializer:
    """Collects big-endian encoded values into a bounded byte buffer.

    Every ``put_*`` method returns the serializer so that calls can be chained.
    """

    capacity = _CAPACITY

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def data(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._buffer)

    def _reserve(self, count: int) -> None:
        if len(self._buffer) + count >= self.capacity:
            raise SerializerOverflowError("Serializer data overflow!")

    def _put_int(self, value: int, size: int) -> Serializer:
        raw = int(value).to_bytes(size, "big")
        self._reserve(size)
        self._buffer += raw
        return self

    def put_u8(self, value: int) -> Serializer:
        """Write one unsigned byte."""
        return self._put_int(value, 1)

    def put_u16(self, value: int) -> Serializer:
        """Write an unsigned 16-bit big-endian integer."""
        return self._put_int(value, 2)

    def put_u32(self, value: int) -> Serializer:
        """Write an unsigned 32-bit big-endian integer."""
        return self._put_int(value, 4)

    def put_u64(self, value: int) -> Serializer:
        """Write an unsigned 64-bit big-endian integer."""
        return self._put_int(value, 8)

    def put_bytes(self, data: bytes | bytearray | list[int]) -> Serializer:
        """Write raw bytes as they are."""
        raw = bytes(data)
        self._reserve(len(raw))
        self._buffer += raw
        return self

    def put(self, obj: Any) -> Serializer:
        """Write an object that knows how to serialize itself, or each of a collection of them."""
        serialize = getattr(obj, "serialize", None)
        if callable(serialize):
            serialize(self)
        else:
            for item in obj:
                self.put(item)
        return self

    def align(self, alignment: int) -> Serializer:
        """Pad with zero bytes up to the next multiple of ``alignment``."""
        if alignment <= 0:
            raise ValueError("alignment must be positive")
        remainder = len(self._buffer) % alignment
        if remainder:
            padding = alignment - remainder
            self._reserve(padding)
            self._buffer += bytes(padding)
        return self

    def clear(self) -> None:
        """Discard everything written so far."""
        self._buffer.clear()