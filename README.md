# stunkit

`stunkit` builds, encodes and decodes classic STUN messages (RFC 3489),
provides a small UDP client for exchanging datagrams with a STUN server, and
lists the addresses of the local network adapters.

## Installation

```
pip install stunkit
```

The only runtime dependency is `psutil`, used to enumerate network adapters.
To run the test suite, install the `test` extra and run `pytest` from the
project directory:

```
pip install "stunkit[test]"
pytest
```

## Modules

| Module                   | Contents |
|--------------------------|----------|
| `stunkit.enums`          | `AttributeType`, `MessageType`, `NatType`, `ProtocolType`, `IpAddressType` (all `IntEnum`) |
| `stunkit.text`           | `attribute_type_name`, `message_type_name`, `to_hex_string` |
| `stunkit.serializer`     | `Serializer` (big-endian writer) and `SerializerOverflowError` |
| `stunkit.deserializer`   | `Deserializer` (big-endian reader) and `DeserializerError` |
| `stunkit.sha1`           | `sha1`, a SHA-1 digest helper built on `hashlib` |
| `stunkit.attributes`     | `Attribute` and the RFC 3489 attributes |
| `stunkit.message`        | `Message`, `MessageBuilder`, `InvalidMessageError`, `attribute_from_deserializer` |
| `stunkit.endpoint`       | `Endpoint` and `InternetAdapter` |
| `stunkit.local_address`  | `get_local_adapters` |
| `stunkit.network`        | `UdpClient` and `Flag` |

## Building a message

A builder comes from `Message.new()`. Set the type with `with_type`, the
16-byte transaction id with `with_transaction_id` or
`with_random_transaction_id`, add attributes with `with_attribute`, and ask
for a trailing MESSAGE-INTEGRITY attribute with `with_integrity`.

```python
from stunkit.attributes import ChangedAddress, MappedAddress, SourceAddress
from stunkit.enums import MessageType
from stunkit.message import Message

message = (
    Message.new()
    .with_type(MessageType.BINDING_RESPONSE)
    .with_random_transaction_id()
    .with_attribute(MappedAddress("127.0.0.1", 1234))
    .with_attribute(SourceAddress("127.0.0.1", 1234))
    .with_attribute(ChangedAddress("127.0.0.1", 1234))
    .with_integrity()
    .build()
)
wire = message.to_bytes()
```

`build()` raises `InvalidMessageError` when:

- no type was set, or the transaction id is not 16 bytes or is all zeros;
- a Shared Secret Request carries any attribute;
- a message lacks an attribute its type requires (a Binding Response needs
  MAPPED-ADDRESS, SOURCE-ADDRESS and CHANGED-ADDRESS; a Shared Secret Response
  needs USERNAME and PASSWORD; both error responses need ERROR-CODE);
- a message carries an attribute its type forbids.

`with_attribute` refuses a `MessageIntegrity` with `TypeError`; use
`with_integrity()` instead. The integrity attribute holds the SHA-1 digest of
the message encoded so far, in a 60-byte value padded with zeros.

## Messages

`Message` is a dataclass with `type`, `transaction_id` (bytes) and
`attributes` (a list, in wire order). It offers:

- `Message.from_bytes(raw)` — parse the wire form;
- `to_bytes()` and `serialize(serializer)` — encode it;
- `length()` — total length of the attributes, header excluded;
- `has_attribute(t)` and `attribute(t)` — the first attribute of a type, or `None`;
- `add_attribute(a)` — append an attribute;
- `str(message)` — a multi-line human readable dump.

Attributes of a type the package does not know are decoded as
`UndefinedAttribute`, keeping their raw value, so they are encoded again
unchanged.

## Attributes

All attributes derive from `Attribute`, which has `type`, `data_length`,
`length()`, `serialize(serializer)` and `deserialize(deserializer)`, and
compare equal by content.

- `MappedAddress`, `ResponseAddress`, `SourceAddress`, `ChangedAddress`,
  `ReflectedFrom` — take an IPv4 address (dotted text or 32-bit integer) and a
  port; read back with `family()`, `port()`, `address()` and `address_value`.
- `ChangeRequest(change_ip, change_port)`.
- `ErrorCode(code, message=None)` — without a message, codes from
  `PredefinedError` get their standard reason phrase.
- `Username(value)` and `Password(value)` — text padded to four bytes.
- `UnknownAttributes(*types)` — `add`, `contains`, `in`, `len`; an odd list is
  padded by repeating its last entry.
- `MessageIntegrity(raw_data)` — the SHA-1 digest of `raw_data`, or use
  `MessageIntegrity.from_digest(digest)`; the digest is in `value`.
- `UndefinedAttribute(code, data)`.

## Low-level encoding

`Serializer` writes unsigned integers in network byte order, raw bytes and
any object with a `serialize` method, and pads to any alignment. Its
capacity is 1016 bytes; writing that far raises `SerializerOverflowError`.

```python
from stunkit.serializer import Serializer

s = Serializer()
s.put_u16(0x3018).put_u8(0xFF).align(4)
s.data()  # b"\x30\x18\xff\x00"
```

`Deserializer` reads with `get_u8`, `get_u16`, `get_u32`, `get_u64`,
`get_bytes`, `get_string` (trailing NUL bytes dropped), `peek_u16` and `pop`,
reports `position` and `remaining`, and raises `DeserializerError` when the
input runs out.

## Talking to a server

`UdpClient` connects to a host and a service (a port number or a service
name, or a single `Endpoint`), optionally bound to a local address and port,
and can be used as a context manager:

```python
from stunkit.message import Message
from stunkit.network import UdpClient

with UdpClient() as client:
    client.connect("stun.example.com", 3478)
    client.send(wire)
    reply = Message.from_bytes(client.receive(2000))
```

`receive` raises `TimeoutError` when nothing arrives in time. The client also
has `resolve_host`, `can_resolve_host`, `remote_endpoint`, `local_endpoint`,
`connected`, `disconnect` and `protocol`.

`Flag` is a thread-safe boolean: `notify()` sets it, `reset()` clears it and
`wait_for(timeout_ms)` waits for it to be set.

## Local adapters

`get_local_adapters(IpAddressType.V4)` (or `V6`, or `NOT_SPECIFIED`) returns
an `InternetAdapter` (`name`, `addresses`) for each active interface that has
non-loopback addresses of that family.

## What is not included

- No NAT type discovery: `NatType` names the kinds of NAT, but no routine runs
  the RFC 3489 tests to determine one.
- Only UDP: `ProtocolType` lists TCP and TCP/TLS, but there is no client for them.
- No STUN server and no command-line program.
- MESSAGE-INTEGRITY is a plain SHA-1 digest, not an HMAC keyed with a shared secret.