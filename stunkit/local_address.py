"""Discovery of the local machine's network adapters and their addresses."""

from __future__ import annotations

import ipaddress
import socket
from collections.abc import Callable

import psutil

from stunkit.endpoint import InternetAdapter, IpAddress
from stunkit.enums import IpAddressType

__all__ = ["get_local_adapters"]

_FAMILIES = (socket.AF_INET, socket.AF_INET6)


def _selector(address_type: IpAddressType) -> Callable[[IpAddress], bool]:
    address_type = IpAddressType(address_type)
    if address_type is IpAddressType.V4:
        return lambda address: address.version == 4
    if address_type is IpAddressType.V6:
        return lambda address: address.version == 6
    return lambda address: True


def _parse(text: str) -> IpAddress | None:
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def get_local_adapters(
    address_type: IpAddressType = IpAddressType.NOT_SPECIFIED,
) -> list[InternetAdapter]:
    """Return the active adapters with their non-loopback addresses of the given family.

    Adapters left without any matching address are omitted.
    """
    wanted = _selector(address_type)
    stats = psutil.net_if_stats()
    result: list[InternetAdapter] = []

    for name, entries in psutil.net_if_addrs().items():
        adapter_stats = stats.get(name)
        if adapter_stats is not None and not adapter_stats.isup:
            continue

        addresses = []
        for entry in entries:
            if entry.family not in _FAMILIES or not entry.address:
                continue
            address = _parse(entry.address)
            if address is None or address.is_loopback or not wanted(address):
                continue
            addresses.append(entry.address)

        if addresses:
            result.append(InternetAdapter(name, tuple(addresses)))

    return result