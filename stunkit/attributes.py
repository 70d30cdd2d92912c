"""STUN message attributes and their wire format.

Every attribute is written as a 16-bit type, a 16-bit length of the value
and the value itself, padded to a multiple of four bytes.
"""

from __future__ import annotations

import ipaddress
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any

from stunkit.deserializer import Deserializer
from stunkit.enums import AttributeType
from stunkit.serializer import Serializer
from stunkit.sha1 import DIGEST_SIZE, sha1
from stunkit.text import attribute_type_name, to_hex_string

__all__ = [
    "Attribute",
    "AddressAttribute",
    "MappedAddress",
    "ResponseAddress",
    "SourceAddress",
    "ChangedAddress",
    "ReflectedFrom",
    "ChangeRequest",
    "PredefinedError",
    "ErrorCode",
    "MessageIntegrity",
    "Password",
    "Username",
    "UnknownAttributes",
    "UndefinedAttribute",
]

_ALIGNMENT = 4
_HEADER_SIZE = 4
IPV4_FAMILY = 0x01


def _aligned(size: int) -> int:
    return -(-size // _ALIGNMENT) * _ALIGNMENT


def _as_attribute_type(code: int) -> int:
    try:
        return AttributeType(code)
    except ValueError:
        return code


def _pad(serializer: Serializer, written: int) -> None:
    padding = _aligned(written) - written
    if padding:
        serializer.put_bytes(bytes(padding))


class Attribute(ABC):
    """Base of every STUN attribute."""

    attribute_type: int

    @property
    def type(self) -> int:
        """Attribute type code."""
        return self.attribute_type

    @property
    @abstractmethod
    def data_length(self) -> int:
        """Length of the value on the wire, padding included."""

    def length(self) -> int:
        """Length of the whole attribute on the wire, header included."""
        return self.data_length + _HEADER_SIZE

    def serialize(self, serializer: Serializer) -> None:
        """Write the attribute, header and value, into ``serializer``."""
        serializer.put_u16(self.type).put_u16(self.data_length)
        self._write_value(serializer)

    def deserialize(self, deserializer: Deserializer) -> Attribute:
        """Read length and value from ``deserializer``; the type is already consumed."""
        length = deserializer.get_u16()
        self._read_value(Deserializer(deserializer.get_bytes(length)))
        return self

    @abstractmethod
    def _write_value(self, serializer: Serializer) -> None:
        """Write the value part."""

    @abstractmethod
    def _read_value(self, value: Deserializer) -> None:
        """Parse the value part, given exactly its bytes."""

    @abstractmethod
    def _fields(self) -> tuple[Any, ...]:
        """Values that identify the attribute's content."""

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.type == other.type and self._fields() == other._fields()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self._fields()!r}"


class AddressAttribute(Attribute):
    """An IPv4 address and port."""

    def __init__(self, address: int | str = 0, port: int = 0) -> None:
        if isinstance(address, str):
            address = int(ipaddress.IPv4Address(address))
        elif not 0 <= address <= 0xFFFFFFFF:
            raise ValueError(f"IPv4 address out of range: {address}")
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"Port out of range: {port}")
        self._family = IPV4_FAMILY
        self._address = int(address)
        self._port = int(port)

    def family(self) -> int:
        """Address family code; 0x01 for IPv4."""
        return self._family

    def port(self) -> int:
        """Port number."""
        return self._port

    def address(self) -> str:
        """Address in dotted decimal form."""
        return str(ipaddress.IPv4Address(self._address))

    @property
    def address_value(self) -> int:
        """Address as a 32-bit integer."""
        return self._address

    @property
    def data_length(self) -> int:
        return 8

    def _write_value(self, serializer: Serializer) -> None:
        serializer.put_u8(0).put_u8(self._family).put_u16(self._port).put_u32(self._address)

    def _read_value(self, value: Deserializer) -> None:
        value.pop(1)
        self._family = value.get_u8()
        self._port = value.get_u16()
        self._address = value.get_u32()

    def _fields(self) -> tuple[Any, ...]:
        return (self._family, self._address, self._port)

    def __str__(self) -> str:
        return f"{attribute_type_name(self.type)}: {self.address()}:{self._port}"


class MappedAddress(AddressAttribute):
    """MAPPED-ADDRESS: the source address seen by the server."""

    attribute_type = AttributeType.MAPPED_ADDRESS


class ResponseAddress(AddressAttribute):
    """RESPONSE-ADDRESS: where the response should be sent."""

    attribute_type = AttributeType.RESPONSE_ADDRESS


class SourceAddress(AddressAttribute):
    """SOURCE-ADDRESS: the address the server sent the response from."""

    attribute_type = AttributeType.SOURCE_ADDRESS


class ChangedAddress(AddressAttribute):
    """CHANGED-ADDRESS: the server's alternate address."""

    attribute_type = AttributeType.CHANGED_ADDRESS


class ReflectedFrom(AddressAttribute):
    """REFLECTED-FROM: the requester's address, for tracing."""

    attribute_type = AttributeType.REFLECTED_FROM


class ChangeRequest(Attribute):
    """CHANGE-REQUEST: asks the server to answer from another IP and/or port."""

    attribute_type = AttributeType.CHANGE_REQUEST

    _CHANGE_IP = 0x04
    _CHANGE_PORT = 0x02

    def __init__(self, change_ip: bool = False, change_port: bool = False) -> None:
        self._change_ip = bool(change_ip)
        self._change_port = bool(change_port)

    @property
    def change_ip(self) -> bool:
        return self._change_ip

    @property
    def change_port(self) -> bool:
        return self._change_port

    @property
    def data_length(self) -> int:
        return 4

    def _write_value(self, serializer: Serializer) -> None:
        flags = (self._CHANGE_IP if self._change_ip else 0) | (
            self._CHANGE_PORT if self._change_port else 0
        )
        serializer.put_u32(flags)

    def _read_value(self, value: Deserializer) -> None:
        flags = value.get_u32()
        self._change_ip = bool(flags & self._CHANGE_IP)
        self._change_port = bool(flags & self._CHANGE_PORT)

    def _fields(self) -> tuple[Any, ...]:
        return (self._change_ip, self._change_port)

    def __str__(self) -> str:
        return (
            f"ChangeRequest: change ip = {self._change_ip}, "
            f"change port = {self._change_port}"
        )


class PredefinedError(IntEnum):
    """Error codes defined by the protocol."""

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    UNKNOWN_ATTRIBUTE = 420
    STALE_CREDENTIALS = 430
    INTEGRITY_CHECK_FAILURE = 431
    MISSING_USERNAME = 432
    USE_TLS = 433
    SERVER_ERROR = 500
    GLOBAL_FAILURE = 600


_REASONS = {
    PredefinedError.BAD_REQUEST: (
        "The request was malformed.  The client should not retry the request "
        "without modification from the previous attempt."
    ),
    PredefinedError.UNAUTHORIZED: (
        "The Binding Request did not contain a MESSAGE-INTEGRITY attribute."
    ),
    PredefinedError.UNKNOWN_ATTRIBUTE: (
        "The server did not understand a mandatory attribute in the request."
    ),
    PredefinedError.STALE_CREDENTIALS: (
        "The Binding Request did contain a MESSAGE-INTEGRITY attribute, but it "
        "used a shared secret that has expired.  The client should obtain a new "
        "shared secret and try again."
    ),
    PredefinedError.INTEGRITY_CHECK_FAILURE: (
        "The Binding Request contained a MESSAGE-INTEGRITY attribute, but the "
        "HMAC failed verification.  This could be a sign of a potential attack, "
        "or client implementation error."
    ),
    PredefinedError.MISSING_USERNAME: (
        "The Binding Request contained a MESSAGE-INTEGRITY attribute, but not a "
        "USERNAME attribute.  Both must be present for integrity checks."
    ),
    PredefinedError.USE_TLS: (
        "The Shared Secret request has to be sent over TLS, but was not "
        "received over TLS."
    ),
    PredefinedError.SERVER_ERROR: (
        "The server has suffered a temporary error.  The client should try again."
    ),
    PredefinedError.GLOBAL_FAILURE: (
        "The server is refusing to fulfill the request.  The client should not retry."
    ),
}


class ErrorCode(Attribute):
    """ERROR-CODE: a numeric code with a reason phrase."""

    attribute_type = AttributeType.ERROR_CODE

    def __init__(self, code: int = 0, message: str | None = None) -> None:
        code = int(code)
        if code < 0 or code // 100 > 0xFF:
            raise ValueError(f"Error code out of range: {code}")
        if message is None:
            try:
                message = _REASONS[PredefinedError(code)]
            except ValueError:
                message = ""
        self._code = code
        self._message = message

    @property
    def code(self) -> int:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def data_length(self) -> int:
        return 4 + _aligned(len(self._message.encode("utf-8")))

    def _write_value(self, serializer: Serializer) -> None:
        text = self._message.encode("utf-8")
        serializer.put_u16(0).put_u8(self._code // 100).put_u8(self._code % 100)
        serializer.put_bytes(text)
        _pad(serializer, len(text))

    def _read_value(self, value: Deserializer) -> None:
        value.pop(2)
        error_class = value.get_u8()
        number = value.get_u8()
        self._code = error_class * 100 + number
        self._message = value.get_string(value.remaining)

    def _fields(self) -> tuple[Any, ...]:
        return (self._code, self._message)

    def __str__(self) -> str:
        return f"ErrorCode: {self._code} {self._message}"


class MessageIntegrity(Attribute):
    """MESSAGE-INTEGRITY: a SHA-1 digest of the message that precedes it."""

    attribute_type = AttributeType.MESSAGE_INTEGRITY

    _DATA_LENGTH = 60

    def __init__(self, raw_data: bytes | bytearray | None = None) -> None:
        self._value = sha1(raw_data) if raw_data is not None else b""

    @classmethod
    def from_digest(cls, digest: bytes) -> MessageIntegrity:
        """Build the attribute around an already computed digest."""
        if len(digest) > DIGEST_SIZE:
            raise ValueError(f"Digest longer than {DIGEST_SIZE} bytes")
        result = cls()
        result._value = bytes(digest)
        return result

    @property
    def value(self) -> bytes:
        return self._value

    @property
    def data_length(self) -> int:
        return self._DATA_LENGTH

    def _write_value(self, serializer: Serializer) -> None:
        serializer.put_bytes(self._value)
        serializer.put_bytes(bytes(self._DATA_LENGTH - len(self._value)))

    def _read_value(self, value: Deserializer) -> None:
        self._value = value.get_bytes(min(DIGEST_SIZE, value.remaining))

    def _fields(self) -> tuple[Any, ...]:
        return (self._value,)

    def __str__(self) -> str:
        return f"MessageIntegrity: {to_hex_string(self._value)}"


class _TextAttribute(Attribute):
    """An attribute whose value is a padded text string."""

    def __init__(self, value: str = "") -> None:
        self._value = value

    @property
    def value(self) -> str:
        return self._value

    @property
    def data_length(self) -> int:
        return _aligned(len(self._value.encode("utf-8")))

    def _write_value(self, serializer: Serializer) -> None:
        text = self._value.encode("utf-8")
        serializer.put_bytes(text)
        _pad(serializer, len(text))

    def _read_value(self, value: Deserializer) -> None:
        self._value = value.get_string(value.remaining)

    def _fields(self) -> tuple[Any, ...]:
        return (self._value,)

    def __str__(self) -> str:
        return f"{attribute_type_name(self.type)}: {self._value}"


class Password(_TextAttribute):
    """PASSWORD: the shared secret's password."""

    attribute_type = AttributeType.PASSWORD


class Username(_TextAttribute):
    """USERNAME: the shared secret's user name."""

    attribute_type = AttributeType.USERNAME


class UnknownAttributes(Attribute):
    """UNKNOWN-ATTRIBUTES: the attribute types the server did not understand."""

    attribute_type = AttributeType.UNKNOWN_ATTRIBUTES

    def __init__(self, *attribute_types: int) -> None:
        self._attributes: list[int] = []
        for attribute_type in attribute_types:
            self.add(attribute_type)

    @property
    def attributes(self) -> list[int]:
        return list(self._attributes)

    def add(self, attribute_type: int) -> None:
        """Add a type to the list, once."""
        attribute_type = _as_attribute_type(int(attribute_type))
        if attribute_type not in self._attributes:
            self._attributes.append(attribute_type)

    def contains(self, attribute_type: int) -> bool:
        """Return True if the type is listed."""
        return attribute_type in self._attributes

    def __contains__(self, attribute_type: object) -> bool:
        return attribute_type in self._attributes

    def __len__(self) -> int:
        return len(self._attributes)

    def _needs_padding(self) -> bool:
        return len(self._attributes) % 2 == 1

    @property
    def data_length(self) -> int:
        return _aligned(2 * len(self._attributes))

    def _write_value(self, serializer: Serializer) -> None:
        for attribute_type in self._attributes:
            serializer.put_u16(attribute_type)
        if self._needs_padding():
            # An odd list is padded by repeating one of its entries.
            serializer.put_u16(self._attributes[-1])

    def _read_value(self, value: Deserializer) -> None:
        self._attributes = []
        while value.has_data():
            self.add(value.get_u16())

    def _fields(self) -> tuple[Any, ...]:
        return tuple(self._attributes)

    def __str__(self) -> str:
        names = ", ".join(attribute_type_name(a) for a in self._attributes)
        return f"UnknownAttributes: {names}"


class UndefinedAttribute(Attribute):
    """An attribute of a type this package does not know; its value is kept raw."""

    def __init__(self, code: int = 0, data: bytes | bytearray = b"") -> None:
        if not 0 <= code <= 0xFFFF:
            raise ValueError(f"Attribute type out of range: {code}")
        self._code = int(code)
        self._data = bytes(data)

    @property
    def type(self) -> int:
        return _as_attribute_type(self._code)

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def data_length(self) -> int:
        return _aligned(len(self._data))

    def _write_value(self, serializer: Serializer) -> None:
        serializer.put_bytes(self._data)
        _pad(serializer, len(self._data))

    def _read_value(self, value: Deserializer) -> None:
        self._data = value.get_bytes(value.remaining)

    def _fields(self) -> tuple[Any, ...]:
        return (self._code, self._data)

    def __str__(self) -> str:
        return f"UndefinedAttribute 0x{self._code:04x}: {to_hex_string(self._data)}"