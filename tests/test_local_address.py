import socket
from types import SimpleNamespace
from unittest import mock

import pytest

from stunkit.endpoint import InternetAdapter
from stunkit.enums import IpAddressType
from stunkit.local_address import get_local_adapters


def _entry(family, address):
    return SimpleNamespace(family=family, address=address)


ADDRS = {
    "lo": [
        _entry(socket.AF_INET, "127.0.0.1"),
        _entry(socket.AF_INET6, "::1"),
    ],
    "eth0": [
        _entry(socket.AF_INET, "192.0.2.10"),
        _entry(socket.AF_INET6, "2001:db8::10"),
    ],
    "wlan0": [
        _entry(socket.AF_INET6, "2001:db8::20"),
    ],
    "down0": [
        _entry(socket.AF_INET, "198.51.100.5"),
    ],
}

STATS = {
    "lo": SimpleNamespace(isup=True),
    "eth0": SimpleNamespace(isup=True),
    "wlan0": SimpleNamespace(isup=True),
    "down0": SimpleNamespace(isup=False),
}


@pytest.fixture
def fake_interfaces():
    with mock.patch("psutil.net_if_addrs", return_value=ADDRS), mock.patch(
        "psutil.net_if_stats", return_value=STATS
    ):
        yield


def test_all_families(fake_interfaces):
    adapters = get_local_adapters(IpAddressType.NOT_SPECIFIED)
    assert adapters == [
        InternetAdapter("eth0", ("192.0.2.10", "2001:db8::10")),
        InternetAdapter("wlan0", ("2001:db8::20",)),
    ]


def test_only_v4(fake_interfaces):
    adapters = get_local_adapters(IpAddressType.V4)
    assert adapters == [InternetAdapter("eth0", ("192.0.2.10",))]


def test_only_v6(fake_interfaces):
    adapters = get_local_adapters(IpAddressType.V6)
    assert [a.name for a in adapters] == ["eth0", "wlan0"]
    assert all(":" in address for a in adapters for address in a.addresses)


def test_loopback_and_down_interfaces_are_excluded(fake_interfaces):
    names = {a.name for a in get_local_adapters()}
    assert "lo" not in names
    assert "down0" not in names


def test_non_ip_families_are_ignored():
    addrs = {"eth1": [_entry(-1, "00:00:5e:00:53:00")]}
    with mock.patch("psutil.net_if_addrs", return_value=addrs), mock.patch(
        "psutil.net_if_stats", return_value={}
    ):
        assert get_local_adapters(IpAddressType.NOT_SPECIFIED) == []


def test_real_system_returns_no_loopback():
    for adapter in get_local_adapters(IpAddressType.V4):
        assert adapter.addresses
        assert all(not address.startswith("127.") for address in adapter.addresses)