"""Network endpoints and local network adapters."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Union

__all__ = ["IpAddress", "Endpoint", "InternetAdapter"]

IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_MAX_PORT = 0xFFFF


def _unspecified_address() -> IpAddress:
    return ipaddress.IPv4Address(0)


@dataclass(frozen=True)
class Endpoint:
    """A host, given by name or address, and a service, given by name or port."""

    host: Union[str, IpAddress] = field(default_factory=_unspecified_address)
    service: Union[str, int] = 0

    def __post_init__(self) -> None:
        if isinstance(self.service, bool) or not isinstance(self.service, (str, int)):
            raise TypeError(f"Service must be a name or a port, got {self.service!r}")
        if isinstance(self.service, int) and not 0 <= self.service <= _MAX_PORT:
            raise ValueError(f"Port out of range: {self.service}")
        if not isinstance(
            self.host, (str, ipaddress.IPv4Address, ipaddress.IPv6Address)
        ):
            raise TypeError(f"Host must be a name or an IP address, got {self.host!r}")

    @property
    def host_text(self) -> str:
        """The host as text."""
        return str(self.host)

    @property
    def service_text(self) -> str:
        """The service as text; a port is written in decimal."""
        return str(self.service)

    def to_string(self) -> str:
        """Render as ``service:host`` for a named service, ``host:port`` for a port."""
        if isinstance(self.service, str):
            return f"{self.service}:{self.host}"
        return f"{self.host}:{self.service}"

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class InternetAdapter:
    """A network interface and the addresses assigned to it."""

    name: str
    addresses: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "addresses", tuple(self.addresses))

    def __str__(self) -> str:
        if not self.addresses:
            return f"{self.name}No address"
        return self.name + "".join(f" {address}" for address in self.addresses)