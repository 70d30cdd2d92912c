import pytest

from stunkit.enums import (
    AttributeType,
    IpAddressType,
    MessageType,
    NatType,
    ProtocolType,
)


def test_attribute_type_wire_codes():
    assert AttributeType(0x0001) is AttributeType.MAPPED_ADDRESS
    assert AttributeType(0x000A) is AttributeType.UNKNOWN_ATTRIBUTES
    assert AttributeType(0x000B) is AttributeType.REFLECTED_FROM


def test_message_type_wire_codes():
    assert MessageType(0x0101) is MessageType.BINDING_RESPONSE
    assert MessageType(0x0111) is MessageType.BINDING_ERROR_RESPONSE
    assert MessageType(0x0112) is MessageType.SHARED_SECRET_ERROR_RESPONSE


@pytest.mark.parametrize(
    "enum_cls", [AttributeType, MessageType, NatType, ProtocolType, IpAddressType]
)
def test_values_round_trip_through_int(enum_cls):
    for member in enum_cls:
        assert enum_cls(int(member)) is member


@pytest.mark.parametrize(
    "enum_cls", [AttributeType, MessageType, NatType, ProtocolType, IpAddressType]
)
def test_values_are_unique(enum_cls):
    values = [int(member) for member in enum_cls]
    assert len(values) == len(set(values))


def test_attribute_types_are_contiguous_range():
    assert [AttributeType(code) for code in range(0x0001, 0x000C)] == list(
        AttributeType
    )


def test_unknown_attribute_code_rejected():
    with pytest.raises(ValueError):
        AttributeType(0x00FF)


def test_unknown_message_code_rejected():
    with pytest.raises(ValueError):
        MessageType(0x0999)


@pytest.mark.parametrize(
    ("enum_cls", "count"), [(NatType, 5), (ProtocolType, 3), (IpAddressType, 3)]
)
def test_small_enums_cover_sequential_codes(enum_cls, count):
    assert {enum_cls(code) for code in range(count)} == set(enum_cls)
    with pytest.raises(ValueError):
        enum_cls(count)


def test_not_specified_is_zero_and_default_first():
    assert IpAddressType(0) is IpAddressType.NOT_SPECIFIED
    assert list(IpAddressType)[0] is IpAddressType(0)