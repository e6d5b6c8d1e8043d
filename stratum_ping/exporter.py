"""CSV export helpers for stored probe runs."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Optional

from .config import AppConfig, ensure_dir
from .db import PingRun, get_session


class CSVExporter:
    def __init__(self, config: AppConfig, session_factory):
        self.config = config
        self.Session = session_factory

    def build_csv(self, server: Optional[str] = None) -> io.StringIO:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(self._header())

        for row in self._iter_rows(server):
            writer.writerow(row)

        buffer.seek(0)
        return buffer

    def _header(self) -> list:
        return [
            "timestamp",
            "server",
            "address",
            "protocol",
            "tls",
            "transmitted",
            "received",
            "loss_percent",
            "min_ms",
            "avg_ms",
            "max_ms",
            "elapsed_s",
        ]

    def _iter_rows(self, server: Optional[str]):
        with get_session(self.Session) as session:
            query = session.query(PingRun).order_by(PingRun.timestamp, PingRun.id)
            if server:
                query = query.filter(PingRun.server == server)
            for run in query.all():
                yield self._row_for_run(run)

    @staticmethod
    def _row_for_run(run: PingRun) -> list:
        timings = [run.min_ms, run.avg_ms, run.max_ms]
        return [
            run.timestamp.isoformat(),
            run.server,
            run.address,
            run.protocol,
            "true" if run.tls else "false",
            run.attempted,
            run.succeeded,
            run.loss_percent,
            *[CSVExporter._blank_if_none(value) for value in timings],
            run.elapsed_s,
        ]

    @staticmethod
    def _blank_if_none(value):
        return "" if value is None else value

    def write_snapshot(self, target: Optional[Path] = None) -> Path:
        buffer = self.build_csv()
        if target is None:
            target = ensure_dir(self.config.paths.data_dir) / self.config.export.csv_name
        target.write_text(buffer.getvalue(), encoding="utf-8")
        return target
