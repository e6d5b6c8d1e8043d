import socket
import ssl

import pytest

from stratum_ping.errors import ConnectError, ProbeTimeout, TLSHandshakeError
from stratum_ping.probe import transport
from stratum_ping.probe.models import Endpoint, ProbeConfig, ProtocolVariant
from stratum_ping.probe.prober import Prober
from stratum_ping.probe.transport import insecure_tls_context, open_stream

from .conftest import never_reply


def test_plain_stream_write_then_read(make_server):
    server = make_server()
    with open_stream(server.endpoint, use_tls=False, timeout=2) as stream:
        stream.write_all(b"hello\n")
        reply = stream.read(512)
    assert reply.startswith(b'{"id":1')
    assert server.received == [b"hello\n"]


def test_connection_refused_is_connect_error(closed_port):
    endpoint = Endpoint(host="localhost", address=("127.0.0.1", closed_port), family=socket.AF_INET)
    with pytest.raises(ConnectError) as excinfo:
        open_stream(endpoint, use_tls=False, timeout=1)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_read_deadline_raises_probe_timeout(make_server):
    server = make_server(never_reply)
    with open_stream(server.endpoint, use_tls=False, timeout=0.3) as stream:
        stream.write_all(b"hello\n")
        with pytest.raises(ProbeTimeout):
            stream.read(512)


def test_tls_against_plain_peer_fails_handshake(make_server):
    def plain_json(server, conn):
        conn.recv(4096)
        conn.sendall(b'{"id":null,"error":"parse error"}\n')

    server = make_server(plain_json)
    with pytest.raises(TLSHandshakeError) as excinfo:
        open_stream(server.endpoint, use_tls=True, timeout=2)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_insecure_context_skips_verification():
    context = insecure_tls_context()
    assert context.check_hostname is False
    assert context.verify_mode == ssl.CERT_NONE


def test_tls_round_trip_with_self_signed_mismatched_cert(make_server, self_signed_context):
    server = make_server(tls_context=self_signed_context)
    endpoint = Endpoint(host="pool.example.com", address=("127.0.0.1", server.port), family=socket.AF_INET)
    config = ProbeConfig(protocol=ProtocolVariant.V1, login="acc.rig", password="pw", use_tls=True, timeout=2)

    elapsed = Prober(endpoint, config).probe()

    assert 0 <= elapsed < 2
    assert len(server.received) == 1
    line = server.received[0]
    assert line.endswith(b"\n") and line.count(b"\n") == 1
    assert b'"eth_submitLogin"' in line


def test_socket_creation_failure_is_connect_error(monkeypatch, make_server):
    def unsupported_family(*args, **kwargs):
        raise OSError(97, "Address family not supported by protocol")

    endpoint = make_server().endpoint
    monkeypatch.setattr(transport.socket, "socket", unsupported_family)
    with pytest.raises(ConnectError) as excinfo:
        open_stream(endpoint, use_tls=False, timeout=1)
    assert excinfo.value.__cause__.errno == 97
