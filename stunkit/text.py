"""Human readable names of protocol codes and hex rendering of bytes."""

from collections.abc import Iterable

from stunkit.enums import AttributeType, MessageType

__all__ = ["attribute_type_name", "message_type_name", "to_hex_string"]

_ATTRIBUTE_NAMES = {
    AttributeType.CHANGED_ADDRESS: "ChangedAddress",
    AttributeType.CHANGE_REQUEST: "ChangeRequest",
    AttributeType.ERROR_CODE: "ErrorCode",
    AttributeType.MAPPED_ADDRESS: "MappedAddress",
    AttributeType.MESSAGE_INTEGRITY: "MessageIntegrity",
    AttributeType.PASSWORD: "Password",
    AttributeType.REFLECTED_FROM: "ReflectedFrom",
    AttributeType.RESPONSE_ADDRESS: "ResponseAddress",
    AttributeType.SOURCE_ADDRESS: "SourceAddress",
    AttributeType.UNKNOWN_ATTRIBUTES: "UnknownAttributes",
    AttributeType.USERNAME: "Username",
}

_MESSAGE_NAMES = {
    MessageType.BINDING_ERROR_RESPONSE: "BindingErrorResponse",
    MessageType.BINDING_REQUEST: "BindingRequest",
    MessageType.BINDING_RESPONSE: "BindingResponse",
    MessageType.SHARED_SECRET_ERROR_RESPONSE: "SharedSecretErrorResponse",
    MessageType.SHARED_SECRET_REQUEST: "SharedSecretRequest",
    MessageType.SHARED_SECRET_RESPONSE: "SharedSecretResponse",
}


def attribute_type_name(attribute_type: int) -> str:
    """Return the name of an attribute type code."""
    return _ATTRIBUTE_NAMES.get(int(attribute_type), "Unknown attribute type")


def message_type_name(message_type: int) -> str:
    """Return the name of a message type code."""
    return _MESSAGE_NAMES.get(int(message_type), "Unknown message type")


def to_hex_string(data: Iterable[int]) -> str:
    """Render bytes as lower-case hex, each byte without a leading zero."""
    return "".join(format(value, "x") for value in data)