"""Turn a ``host:port`` string into a resolved endpoint."""

from __future__ import annotations

import logging
import socket
from typing import Tuple

from ..errors import InvalidAddress, ResolutionError
from .models import Endpoint

LOGGER = logging.getLogger(__name__)


def split_server(server: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[v6-literal]:port``) into host label and port."""

    server = server.strip()
    if server.startswith("["):
        host, sep, rest = server[1:].partition("]")
        if not sep or not rest.startswith(":"):
            raise InvalidAddress(f"invalid host name: {server}")
        port_text = rest[1:]
    else:
        host, sep, port_text = server.partition(":")
        if not sep:
            raise InvalidAddress(f"missing port in server address: {server!r}")

    if not host:
        raise InvalidAddress("empty host")
    if not port_text:
        raise InvalidAddress("empty port number")
    try:
        port = int(port_text)
    except ValueError as exc:
        raise InvalidAddress(f"invalid port number: {port_text}") from exc
    if not 0 < port < 65536:
        raise InvalidAddress(f"invalid port number: {port_text}")
    return host, port


def resolve_endpoint(server: str, ipv6: bool = False) -> Endpoint:
    """Resolve once; the first address returned is reused for every attempt."""

    host, port = split_server(server)
    family = socket.AF_INET6 if ipv6 else socket.AF_UNSPEC
    try:
        infos = socket.getaddrinfo(host, port, family, socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise ResolutionError(f"failed to resolve {host!r}: {exc}") from exc

    if not infos:
        raise ResolutionError(f"no addresses found for {host!r}")

    resolved_family, _, _, _, sockaddr = infos[0]
    LOGGER.debug("Resolved %s to %s (%d candidates)", host, sockaddr, len(infos))
    return Endpoint(host=host, address=tuple(sockaddr), family=resolved_family)
