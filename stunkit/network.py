"""A UDP client for talking to STUN servers and a simple thread-safe flag."""

from __future__ import annotations

import ipaddress
import logging
import socket
import threading
from typing import Union

from stunkit.endpoint import Endpoint, IpAddress
from stunkit.enums import ProtocolType

__all__ = ["Flag", "UdpClient"]

_log = logging.getLogger(__name__)

_RECEIVE_BUFFER_SIZE = 1024

Host = Union[str, IpAddress, Endpoint]
Service = Union[str, int, None]


class Flag:
    """A boolean that one thread can set and another can wait for."""

    def __init__(self) -> None:
        self._value = False
        self._condition = threading.Condition()

    def get(self) -> bool:
        """Return the current value."""
        return self._value

    def __bool__(self) -> bool:
        return self.get()

    def wait_for(self, timeout_ms: int) -> bool:
        """Wait up to ``timeout_ms`` milliseconds for the flag to be set; return its value."""
        with self._condition:
            self._condition.wait_for(self.get, max(timeout_ms, 0) / 1000)
        return self.get()

    def notify(self) -> None:
        """Set the flag and wake a waiting thread."""
        with self._condition:
            self._value = True
            self._condition.notify_all()

    def reset(self) -> None:
        """Clear the flag."""
        with self._condition:
            self._value = False


def _as_endpoint(host: Host, service: Service) -> Endpoint:
    if isinstance(host, Endpoint):
        if service is not None:
            raise TypeError("An endpoint already carries its service")
        return host
    if service is None:
        raise TypeError("A service name or port is required")
    return Endpoint(host, service)


def _address_from_sockaddr(sockaddr: tuple) -> IpAddress:
    return ipaddress.ip_address(str(sockaddr[0]).split("%", 1)[0])


class UdpClient:
    """A UDP socket connected to one remote endpoint at a time."""

    def __init__(self, local_address: str | None = None, local_port: int = 0) -> None:
        self._local: tuple[str, int] | None = None
        self._family = socket.AF_UNSPEC
        self._socket: socket.socket | None = None
        if local_address is not None:
            address = ipaddress.ip_address(local_address)
            self._family = socket.AF_INET if address.version == 4 else socket.AF_INET6
            self._local = (str(address), int(local_port))
            self._socket = self._open(self._family)

    def _open(self, family: int) -> socket.socket:
        sock = socket.socket(family, socket.SOCK_DGRAM)
        if self._local is not None:
            try:
                sock.bind(self._local)
            except OSError:
                sock.close()
                raise
        return sock

    def __enter__(self) -> UdpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.connected():
            self.disconnect()

    def protocol(self) -> ProtocolType:
        """The transport protocol of this client."""
        return ProtocolType.UDP

    def _resolve(self, endpoint: Endpoint) -> list[tuple]:
        try:
            results = socket.getaddrinfo(
                endpoint.host_text,
                endpoint.service_text,
                self._family,
                socket.SOCK_DGRAM,
                socket.IPPROTO_UDP,
            )
        except (OSError, UnicodeError) as exc:
            raise OSError(f"Can't resolve host {endpoint}. {exc}") from exc
        if not results:
            raise OSError(f"Can't resolve host {endpoint}. ")
        return results

    def connect(self, host: Host, service: Service = None) -> None:
        """Connect to the first reachable address of ``host`` and ``service``."""
        endpoint = _as_endpoint(host, service)
        if self.connected():
            self.disconnect()

        last_error: OSError | None = None
        for family, _, _, _, sockaddr in self._resolve(endpoint):
            try:
                sock = self._open(family)
            except OSError as exc:
                last_error = exc
                continue
            try:
                sock.connect(sockaddr)
            except OSError as exc:
                sock.close()
                last_error = exc
                continue
            self._socket = sock
            return
        raise last_error if last_error is not None else OSError(
            f"Can't connect to {endpoint}"
        )

    def disconnect(self) -> None:
        """Close the socket; errors while closing are logged, not raised."""
        sock, self._socket = self._socket, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError as exc:
            _log.error("Error while close connection: %s", exc)

    def resolve_host(self, host: Host, service: Service = None) -> list[Endpoint]:
        """Return every endpoint that ``host`` and ``service`` resolve to."""
        endpoint = _as_endpoint(host, service)
        result: list[Endpoint] = []
        for _, _, _, _, sockaddr in self._resolve(endpoint):
            resolved = Endpoint(_address_from_sockaddr(sockaddr), int(sockaddr[1]))
            if resolved not in result:
                result.append(resolved)
        return result

    def can_resolve_host(self, host: Host, service: Service = None) -> bool:
        """Return True if ``host`` and ``service`` resolve to at least one address."""
        try:
            return bool(self.resolve_host(host, service))
        except OSError:
            return False

    def _require_connection(self) -> socket.socket:
        if self._socket is None:
            raise ConnectionError("No connection to the server")
        return self._socket

    def send(self, data: bytes | bytearray | str) -> None:
        """Send one datagram; text is sent as UTF-8."""
        sock = self._require_connection()
        if isinstance(data, str):
            data = data.encode("utf-8")
        sock.send(bytes(data))

    def receive(self, timeout_ms: int = 2000) -> bytes:
        """Wait up to ``timeout_ms`` milliseconds for one datagram and return it."""
        sock = self._require_connection()
        _log.info("Waiting for messages. Waiting timeout %dms", timeout_ms)
        sock.settimeout(max(timeout_ms, 0) / 1000)
        try:
            data = sock.recv(_RECEIVE_BUFFER_SIZE)
        except socket.timeout as exc:
            raise TimeoutError(
                f"No message received within {timeout_ms}ms"
            ) from exc
        except OSError as exc:
            raise RuntimeError(f"Receive error: {exc}") from exc
        finally:
            if self._socket is sock:
                sock.settimeout(None)
        if not data:
            raise RuntimeError("Received empty message")
        return data

    def remote_endpoint(self) -> Endpoint:
        """The peer's address and port, or an empty endpoint when not connected."""
        if self._socket is None:
            return Endpoint()
        try:
            peer = self._socket.getpeername()
        except OSError:
            return Endpoint()
        return Endpoint(_address_from_sockaddr(peer), int(peer[1]))

    def local_endpoint(self) -> Endpoint:
        """The local address and port, or an empty endpoint when not connected."""
        if self._socket is None:
            return Endpoint()
        try:
            local = self._socket.getsockname()
        except OSError:
            return Endpoint()
        return Endpoint(_address_from_sockaddr(local), int(local[1]))

    def connected(self) -> bool:
        """Return True while the socket is open."""
        return self._socket is not None