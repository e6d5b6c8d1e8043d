import csv
import io
import socket

import pytest

from stratum_ping.config import load_config
from stratum_ping.db import init_db
from stratum_ping.exporter import CSVExporter
from stratum_ping.history import RunHistory
from stratum_ping.probe.models import Endpoint, ProbeConfig, ProtocolVariant, Statistics

ENDPOINT = Endpoint(host="pool.example.com", address=("192.0.2.10", 3333), family=socket.AF_INET)


@pytest.fixture
def session_factory(tmp_path):
    return init_db(tmp_path / "data", "history.db")


def _stats(*durations, failures=0):
    stats = Statistics()
    for duration in durations:
        stats.record_success(duration)
    for _ in range(failures):
        stats.record_failure()
    stats.elapsed = 3.5
    return stats


def test_record_and_recent(session_factory):
    history = RunHistory(session_factory)
    config = ProbeConfig(protocol=ProtocolVariant.V1, use_tls=True)
    history.record("pool.example.com:3333", ENDPOINT, config, _stats(0.01, 0.03, failures=1))
    history.record("other.example.com:4444", ENDPOINT, config, _stats(failures=2))

    runs = history.recent(10)
    assert [run.server for run in runs] == ["pool.example.com:3333", "other.example.com:4444"]

    first = history.to_dict(runs[0])
    assert first["protocol"] == "stratum1"
    assert first["tls"] is True
    assert first["transmitted"] == 3
    assert first["loss_percent"] == 33
    assert first["avg_ms"] == pytest.approx(20.0)

    second = history.to_dict(runs[1])
    assert second["min_ms"] is None and second["avg_ms"] is None


def test_recent_filters_by_server_and_limit(session_factory):
    history = RunHistory(session_factory)
    config = ProbeConfig(protocol=ProtocolVariant.V2)
    for _ in range(3):
        history.record("pool.example.com:3333", ENDPOINT, config, _stats(0.01))
    history.record("other.example.com:4444", ENDPOINT, config, _stats(0.01))

    assert len(history.recent(2, "pool.example.com:3333")) == 2
    assert len(history.recent(None, "other.example.com:4444")) == 1


def test_csv_export(tmp_path, session_factory, monkeypatch):
    monkeypatch.chdir(tmp_path)
    history = RunHistory(session_factory)
    history.record("pool.example.com:3333", ENDPOINT, ProbeConfig(protocol=ProtocolVariant.V2), _stats(failures=1))

    exporter = CSVExporter(load_config(), session_factory)
    rows = list(csv.reader(io.StringIO(exporter.build_csv().getvalue())))
    assert rows[0][:3] == ["timestamp", "server", "address"]
    assert rows[1][1] == "pool.example.com:3333"
    assert rows[1][8:11] == ["", "", ""]

    target = exporter.write_snapshot()
    assert target == (tmp_path / "data" / "runs.csv").resolve()
    assert target.read_text(encoding="utf-8").startswith("timestamp,server")
