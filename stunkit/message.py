"""STUN messages: the header, the attribute list and a validating builder."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

from stunkit.attributes import (
    Attribute,
    ChangedAddress,
    ChangeRequest,
    ErrorCode,
    MappedAddress,
    MessageIntegrity,
    Password,
    ReflectedFrom,
    ResponseAddress,
    SourceAddress,
    UndefinedAttribute,
    UnknownAttributes,
    Username,
)
from stunkit.deserializer import Deserializer
from stunkit.enums import AttributeType, MessageType
from stunkit.serializer import Serializer
from stunkit.text import message_type_name, to_hex_string

__all__ = [
    "InvalidMessageError",
    "attribute_from_deserializer",
    "Message",
    "MessageBuilder",
]

TRANSACTION_ID_SIZE = 16

_ATTRIBUTE_CLASSES: dict[int, type[Attribute]] = {
    AttributeType.CHANGED_ADDRESS: ChangedAddress,
    AttributeType.CHANGE_REQUEST: ChangeRequest,
    AttributeType.ERROR_CODE: ErrorCode,
    AttributeType.MAPPED_ADDRESS: MappedAddress,
    AttributeType.MESSAGE_INTEGRITY: MessageIntegrity,
    AttributeType.PASSWORD: Password,
    AttributeType.REFLECTED_FROM: ReflectedFrom,
    AttributeType.RESPONSE_ADDRESS: ResponseAddress,
    AttributeType.SOURCE_ADDRESS: SourceAddress,
    AttributeType.UNKNOWN_ATTRIBUTES: UnknownAttributes,
    AttributeType.USERNAME: Username,
}


class InvalidMessageError(ValueError):
    """Raised when a built message breaks the rules for its type."""


def attribute_from_deserializer(deserializer: Deserializer) -> Attribute:
    """Read one attribute, choosing its class by the type code in front of it."""
    code = deserializer.get_u16()
    cls = _ATTRIBUTE_CLASSES.get(code)
    attribute = cls() if cls is not None else UndefinedAttribute(code)
    attribute.deserialize(deserializer)
    return attribute


def _as_message_type(code: int) -> int:
    try:
        return MessageType(code)
    except ValueError:
        return code


@dataclass
class Message:
    """A STUN message: type, 16-byte transaction id and attributes in order."""

    type: int = MessageType.ERROR_TYPE
    transaction_id: bytes = b""
    attributes: list[Attribute] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.transaction_id = bytes(self.transaction_id)
        self.attributes = list(self.attributes)

    @staticmethod
    def new() -> MessageBuilder:
        """Start building a message."""
        return MessageBuilder()

    @classmethod
    def from_bytes(cls, raw_data: bytes | bytearray | list[int]) -> Message:
        """Parse a message from its wire form."""
        deserializer = Deserializer(raw_data)
        result = cls(type=_as_message_type(deserializer.get_u16()))
        deserializer.pop(2)
        result.transaction_id = deserializer.get_bytes(TRANSACTION_ID_SIZE)
        while deserializer.has_data():
            result.add_attribute(attribute_from_deserializer(deserializer))
        return result

    def length(self) -> int:
        """Length of all attributes on the wire, the header excluded."""
        return sum(attribute.length() for attribute in self.attributes)

    def has_attribute(self, attribute_type: int) -> bool:
        """Return True if an attribute of the given type is present."""
        return self.attribute(attribute_type) is not None

    def attribute(self, attribute_type: int) -> Attribute | None:
        """Return the first attribute of the given type, or None."""
        return next(
            (a for a in self.attributes if a.type == attribute_type), None
        )

    def add_attribute(self, attribute: Attribute) -> None:
        """Append an attribute."""
        self.attributes.append(attribute)

    def serialize(self, serializer: Serializer) -> None:
        """Write the header and every attribute into ``serializer``."""
        serializer.put_u16(self.type).put_u16(self.length())
        serializer.put_bytes(self.transaction_id)
        for attribute in self.attributes:
            serializer.put(attribute)

    def to_bytes(self) -> bytes:
        """Return the wire form of the message."""
        serializer = Serializer()
        serializer.put(self)
        return serializer.data()

    def __str__(self) -> str:
        attributes = "".join(f"\t\t{attribute}\n" for attribute in self.attributes)
        return (
            "Message:\n"
            f"\tType: {message_type_name(self.type)}\n"
            f"\tTransaction id: {to_hex_string(self.transaction_id)}\n"
            f"\tAttributes: \n{attributes}"
        )


_A = AttributeType

# For each message type: attribute types it must not carry, and types it must carry.
_RULES: dict[int, tuple[frozenset[int], frozenset[int]]] = {
    MessageType.BINDING_REQUEST: (
        frozenset({
            _A.MAPPED_ADDRESS, _A.SOURCE_ADDRESS, _A.CHANGED_ADDRESS,
            _A.PASSWORD, _A.ERROR_CODE, _A.UNKNOWN_ATTRIBUTES, _A.REFLECTED_FROM,
        }),
        frozenset(),
    ),
    MessageType.BINDING_RESPONSE: (
        frozenset({
            _A.RESPONSE_ADDRESS, _A.CHANGE_REQUEST, _A.USERNAME,
            _A.PASSWORD, _A.ERROR_CODE, _A.UNKNOWN_ATTRIBUTES,
        }),
        frozenset({_A.MAPPED_ADDRESS, _A.SOURCE_ADDRESS, _A.CHANGED_ADDRESS}),
    ),
    MessageType.SHARED_SECRET_RESPONSE: (
        frozenset({
            _A.MAPPED_ADDRESS, _A.RESPONSE_ADDRESS, _A.CHANGE_REQUEST,
            _A.SOURCE_ADDRESS, _A.CHANGED_ADDRESS, _A.MESSAGE_INTEGRITY,
            _A.ERROR_CODE, _A.UNKNOWN_ATTRIBUTES, _A.REFLECTED_FROM,
        }),
        frozenset({_A.USERNAME, _A.PASSWORD}),
    ),
}

_ERROR_RULE = (
    frozenset({
        _A.MAPPED_ADDRESS, _A.RESPONSE_ADDRESS, _A.CHANGE_REQUEST,
        _A.SOURCE_ADDRESS, _A.CHANGED_ADDRESS, _A.USERNAME,
        _A.PASSWORD, _A.MESSAGE_INTEGRITY, _A.REFLECTED_FROM,
    }),
    frozenset({_A.ERROR_CODE}),
)
_RULES[MessageType.BINDING_ERROR_RESPONSE] = _ERROR_RULE
_RULES[MessageType.SHARED_SECRET_ERROR_RESPONSE] = _ERROR_RULE


class MessageBuilder:
    """Fluent builder that checks a message against the rules for its type."""

    def __init__(self) -> None:
        self._message = Message()
        self._add_integrity = False

    def with_type(self, message_type: int) -> MessageBuilder:
        """Set the message type."""
        self._message.type = _as_message_type(int(message_type))
        return self

    def with_transaction_id(self, transaction_id: bytes | bytearray | list[int]) -> MessageBuilder:
        """Set the transaction id."""
        self._message.transaction_id = bytes(transaction_id)
        return self

    def with_random_transaction_id(self) -> MessageBuilder:
        """Set a random, non-zero 16-byte transaction id."""
        transaction_id = bytes(TRANSACTION_ID_SIZE)
        while not any(transaction_id):
            transaction_id = secrets.token_bytes(TRANSACTION_ID_SIZE)
        self._message.transaction_id = transaction_id
        return self

    def with_integrity(self) -> MessageBuilder:
        """Append a MESSAGE-INTEGRITY attribute when the message is built."""
        self._add_integrity = True
        return self

    def with_attribute(self, attribute: Attribute) -> MessageBuilder:
        """Append an attribute; integrity is added by with_integrity instead."""
        if isinstance(attribute, MessageIntegrity):
            raise TypeError("Use with_integrity() to add a MESSAGE-INTEGRITY attribute")
        self._message.add_attribute(attribute)
        return self

    def build(self) -> Message:
        """Check the message and return it."""
        self._check()
        message = self._message
        if self._add_integrity:
            message.add_attribute(MessageIntegrity(message.to_bytes()))
        self._message = Message()
        self._add_integrity = False
        return message

    def _check(self) -> None:
        message = self._message
        if message.type == MessageType.ERROR_TYPE:
            raise InvalidMessageError("Message type is not set")
        if len(message.transaction_id) != TRANSACTION_ID_SIZE:
            raise InvalidMessageError(
                f"Transaction id must be {TRANSACTION_ID_SIZE} bytes long"
            )
        if not any(message.transaction_id):
            raise InvalidMessageError("Transaction id must not be all zeros")

        if message.type == MessageType.SHARED_SECRET_REQUEST:
            if message.attributes:
                raise InvalidMessageError("A shared secret request carries no attributes")
            return

        rule = _RULES.get(message.type)
        if rule is None:
            return
        forbidden, required = rule
        present = {attribute.type for attribute in message.attributes}
        missing = required - present
        if missing:
            raise InvalidMessageError(
                f"{message_type_name(message.type)} lacks attributes "
                f"{sorted(int(a) for a in missing)}"
            )
        unexpected = forbidden & present
        if unexpected:
            raise InvalidMessageError(
                f"{message_type_name(message.type)} must not carry attributes "
                f"{sorted(int(a) for a in unexpected)}"
            )