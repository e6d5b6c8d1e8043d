"""Plain TCP and TLS-over-TCP byte streams with a write-then-read contract."""

from __future__ import annotations

import logging
import socket
import ssl
from typing import Optional, Protocol

from ..errors import ConnectError, ProbeTimeout, TLSHandshakeError
from .models import Endpoint

LOGGER = logging.getLogger(__name__)


class ByteStream(Protocol):
    def write_all(self, payload: bytes) -> None: ...

    def read(self, size: int) -> bytes: ...

    def close(self) -> None: ...

    def __enter__(self) -> "ByteStream": ...

    def __exit__(self, *exc_info) -> None: ...


class SocketStream:
    """Wraps a connected socket (plain or TLS) and maps socket errors."""

    def __init__(self, sock: socket.socket):
        self._sock = sock

    def write_all(self, payload: bytes) -> None:
        try:
            self._sock.sendall(payload)
        except socket.timeout as exc:
            raise ProbeTimeout("write timed out") from exc
        except OSError as exc:
            raise ConnectError(f"write failed: {exc}") from exc

    def read(self, size: int) -> bytes:
        try:
            return self._sock.recv(size)
        except socket.timeout as exc:
            raise ProbeTimeout("read timed out") from exc
        except OSError as exc:
            raise ConnectError(f"read failed: {exc}") from exc

    def close(self) -> None:
        try:
            self._sock.close()
        except OSError as exc:
            LOGGER.debug("Ignoring error while closing socket: %s", exc)

    def __enter__(self) -> "SocketStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def insecure_tls_context() -> ssl.SSLContext:
    """Client context that accepts self-signed chains and mismatched names."""

    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _connect_tcp(endpoint: Endpoint, timeout: float) -> socket.socket:
    try:
        sock = socket.socket(endpoint.family, socket.SOCK_STREAM)
    except OSError as exc:
        raise ConnectError(f"cannot open socket for {endpoint.display_address}: {exc}") from exc
    # One timeout covers connect and every later read/write on the socket.
    sock.settimeout(timeout)
    try:
        sock.connect(endpoint.address)
    except socket.timeout as exc:
        sock.close()
        raise ConnectError(f"connection to {endpoint.display_address} timed out") from exc
    except OSError as exc:
        sock.close()
        raise ConnectError(f"failed to connect to {endpoint.display_address}: {exc}") from exc
    return sock


def _wrap_tls(sock: socket.socket, endpoint: Endpoint, context: ssl.SSLContext) -> socket.socket:
    try:
        return context.wrap_socket(sock, server_hostname=endpoint.host)
    except (ssl.SSLError, OSError) as exc:
        sock.close()
        raise TLSHandshakeError(f"TLS handshake with {endpoint.display_address} failed: {exc}") from exc


def open_stream(
    endpoint: Endpoint,
    use_tls: bool,
    timeout: float,
    context: Optional[ssl.SSLContext] = None,
) -> SocketStream:
    sock = _connect_tcp(endpoint, timeout)
    LOGGER.debug("Connected to %s (tls=%s)", endpoint.display_address, use_tls)
    if use_tls:
        sock = _wrap_tls(sock, endpoint, context or insecure_tls_context())
    return SocketStream(sock)
