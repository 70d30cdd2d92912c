import ipaddress
import socket
import threading

import pytest

from stunkit.endpoint import Endpoint
from stunkit.enums import ProtocolType
from stunkit.network import Flag, UdpClient

LOCALHOST = "127.0.0.1"


@pytest.fixture
def server():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind((LOCALHOST, 0))
    sock.settimeout(2)
    yield sock
    sock.close()


@pytest.fixture
def client():
    udp = UdpClient()
    yield udp
    udp.disconnect()


def test_flag_starts_cleared():
    flag = Flag()
    assert flag.get() is False
    assert not flag


def test_flag_notify_sets_and_reset_clears():
    flag = Flag()
    flag.notify()
    assert flag.get() is True
    assert flag.wait_for(0) is True
    flag.reset()
    assert flag.get() is False


def test_flag_wait_times_out_when_not_set():
    flag = Flag()
    assert flag.wait_for(10) is False


def test_flag_wait_wakes_on_notify_from_thread():
    flag = Flag()
    timer = threading.Timer(0.02, flag.notify)
    timer.start()
    try:
        assert flag.wait_for(2000) is True
    finally:
        timer.join()


def test_protocol_is_udp(client):
    assert client.protocol() is ProtocolType.UDP


def test_new_client_is_not_connected(client):
    assert client.connected() is False
    assert client.remote_endpoint() == Endpoint()
    assert client.local_endpoint() == Endpoint()


def test_send_without_connection_raises(client):
    with pytest.raises(ConnectionError):
        client.send(b"ping")


def test_receive_without_connection_raises(client):
    with pytest.raises(ConnectionError):
        client.receive(10)


def test_send_and_receive_round_trip(client, server):
    port = server.getsockname()[1]
    client.connect(LOCALHOST, port)
    assert client.connected() is True

    client.send(b"\x00\x01hello")
    data, peer = server.recvfrom(1024)
    assert data == b"\x00\x01hello"

    server.sendto(b"reply", peer)
    assert client.receive(2000) == b"reply"


def test_send_text_is_utf8(client, server):
    client.connect(LOCALHOST, server.getsockname()[1])
    client.send("héllo")
    data, _ = server.recvfrom(1024)
    assert data == "héllo".encode("utf-8")


def test_endpoints_after_connect(client, server):
    port = server.getsockname()[1]
    client.connect(Endpoint(ipaddress.ip_address(LOCALHOST), port))
    assert client.remote_endpoint() == Endpoint(ipaddress.ip_address(LOCALHOST), port)

    client.send(b"x")
    _, peer = server.recvfrom(1024)
    assert client.local_endpoint().service == peer[1]


def test_receive_times_out(client, server):
    client.connect(LOCALHOST, server.getsockname()[1])
    with pytest.raises(TimeoutError):
        client.receive(20)


def test_disconnect_closes(client, server):
    client.connect(LOCALHOST, server.getsockname()[1])
    client.disconnect()
    assert client.connected() is False
    with pytest.raises(ConnectionError):
        client.send(b"x")


def test_context_manager_disconnects(server):
    with UdpClient() as udp:
        udp.connect(LOCALHOST, server.getsockname()[1])
        assert udp.connected() is True
    assert udp.connected() is False


def test_bound_client_uses_local_port(server):
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    probe.bind((LOCALHOST, 0))
    free_port = probe.getsockname()[1]
    probe.close()

    with UdpClient(LOCALHOST, free_port) as udp:
        assert udp.connected() is True
        udp.connect(LOCALHOST, server.getsockname()[1])
        udp.send(b"x")
        _, peer = server.recvfrom(1024)
        assert peer[1] == free_port


def test_resolve_numeric_host(client):
    result = client.resolve_host(LOCALHOST, 3478)
    assert result == [Endpoint(ipaddress.ip_address(LOCALHOST), 3478)]


def test_can_resolve_numeric_host(client):
    assert client.can_resolve_host(LOCALHOST, "3478") is True


def test_resolve_unknown_service_raises(client):
    with pytest.raises(OSError):
        client.resolve_host(LOCALHOST, "no-such-service-name")
    assert client.can_resolve_host(LOCALHOST, "no-such-service-name") is False


def test_connect_requires_service(client):
    with pytest.raises(TypeError):
        client.connect(LOCALHOST)