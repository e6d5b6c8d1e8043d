import socket
import ssl
import threading
from pathlib import Path

import pytest

from stratum_ping.probe.models import Endpoint


class LoopbackServer:
    """Accepts connections on 127.0.0.1 and runs ``handler(conn)`` for each one."""

    def __init__(self, handler, tls_context=None):
        self.handler = handler
        self.tls_context = tls_context
        self.connections = 0
        self.received = []
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(16)
        self._sock.settimeout(0.2)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    @property
    def port(self) -> int:
        return self._sock.getsockname()[1]

    @property
    def endpoint(self) -> Endpoint:
        return Endpoint(host="localhost", address=("127.0.0.1", self.port), family=socket.AF_INET)

    def _serve(self):
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            self.connections += 1
            conn.settimeout(2)
            try:
                if self.tls_context is not None:
                    conn = self.tls_context.wrap_socket(conn, server_side=True)
                with conn:
                    self.handler(self, conn)
            except OSError:
                conn.close()

    def close(self):
        self._stop.set()
        self._thread.join(timeout=2)
        self._sock.close()


def reply_line(server, conn):
    data = conn.recv(4096)
    server.received.append(data)
    conn.sendall(b'{"id":1,"result":true,"error":null}\n')


def never_reply(server, conn):
    server.received.append(conn.recv(4096))
    server._stop.wait(1.5)


@pytest.fixture
def make_server():
    servers = []

    def factory(handler=reply_line, tls_context=None):
        server = LoopbackServer(handler, tls_context)
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.close()


@pytest.fixture
def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


CERT_DIR = Path(__file__).parent


@pytest.fixture
def self_signed_context():
    """Server context with a self-signed cert issued to not-this-host.invalid."""

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(CERT_DIR / "selfsigned.pem", CERT_DIR / "selfsigned.key")
    return context
