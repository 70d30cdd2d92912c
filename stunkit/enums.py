"""Enumerations of the STUN protocol (RFC 3489) and of the client."""

from enum import IntEnum

__all__ = [
    "AttributeType",
    "MessageType",
    "NatType",
    "ProtocolType",
    "IpAddressType",
]


class AttributeType(IntEnum):
    """Attribute type codes as they appear on the wire."""

    MAPPED_ADDRESS = 0x0001
    RESPONSE_ADDRESS = 0x0002
    CHANGE_REQUEST = 0x0003
    SOURCE_ADDRESS = 0x0004
    CHANGED_ADDRESS = 0x0005
    USERNAME = 0x0006
    PASSWORD = 0x0007
    MESSAGE_INTEGRITY = 0x0008
    ERROR_CODE = 0x0009
    UNKNOWN_ATTRIBUTES = 0x000A
    REFLECTED_FROM = 0x000B


class MessageType(IntEnum):
    """Message type codes as they appear on the wire."""

    ERROR_TYPE = 0x0000
    BINDING_REQUEST = 0x0001
    BINDING_RESPONSE = 0x0101
    BINDING_ERROR_RESPONSE = 0x0111
    SHARED_SECRET_REQUEST = 0x0002
    SHARED_SECRET_RESPONSE = 0x0102
    SHARED_SECRET_ERROR_RESPONSE = 0x0112


class NatType(IntEnum):
    """Kinds of NAT a client may be behind."""

    NONE = 0
    FULL_CONE = 1
    RESTRICTED_CONE = 2
    PORT_RESTRICTED_CONE = 3
    SYMMETRIC = 4


class ProtocolType(IntEnum):
    """Transport protocols a client can use."""

    UDP = 0
    TCP = 1
    TCP_TLS = 2


class IpAddressType(IntEnum):
    """IP address families used to filter local addresses."""

    NOT_SPECIFIED = 0
    V4 = 1
    V6 = 2