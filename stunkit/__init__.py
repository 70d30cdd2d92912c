"""Classic STUN (RFC 3489) messages and attributes, a UDP client and local adapter listing."""

__version__ = "1.0.0"