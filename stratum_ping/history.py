"""Persistence of finished probe runs."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import sessionmaker

from .db import PingRun, get_session
from .probe.models import Endpoint, ProbeConfig, ProtocolVariant, Statistics

LOGGER = logging.getLogger(__name__)


def _ms(seconds: Optional[float]) -> Optional[float]:
    return None if seconds is None else seconds * 1000


class RunHistory:
    def __init__(self, session_factory: sessionmaker):
        self.Session = session_factory

    def record(self, server: str, endpoint: Endpoint, config: ProbeConfig, stats: Statistics) -> PingRun:
        with get_session(self.Session) as session:
            record = PingRun(
                timestamp=datetime.utcnow(),
                server=server,
                host=endpoint.host,
                address=endpoint.display_address,
                protocol=ProtocolVariant.parse(config.protocol).value,
                tls=config.use_tls,
                timeout_s=config.timeout,
                attempted=stats.attempted,
                succeeded=stats.succeeded,
                loss_percent=stats.loss_percent,
                min_ms=_ms(stats.minimum),
                avg_ms=_ms(stats.average),
                max_ms=_ms(stats.maximum),
                elapsed_s=stats.elapsed,
            )
            session.add(record)
            session.flush()
            LOGGER.info(
                "Stored run for %s at %s (%d/%d replies)",
                server,
                record.timestamp.isoformat(),
                stats.succeeded,
                stats.attempted,
            )
            return record

    def recent(self, limit: Optional[int] = None, server: Optional[str] = None) -> List[PingRun]:
        with get_session(self.Session) as session:
            query = session.query(PingRun).order_by(desc(PingRun.timestamp), desc(PingRun.id))
            if server:
                query = query.filter(PingRun.server == server)
            if limit:
                query = query.limit(limit)
            rows = query.all()
            return list(reversed(rows))

    @staticmethod
    def to_dict(run: PingRun) -> dict:
        return {
            "id": run.id,
            "timestamp": run.timestamp.isoformat(),
            "server": run.server,
            "address": run.address,
            "protocol": run.protocol,
            "tls": run.tls,
            "transmitted": run.attempted,
            "received": run.succeeded,
            "loss_percent": run.loss_percent,
            "min_ms": run.min_ms,
            "avg_ms": run.avg_ms,
            "max_ms": run.max_ms,
            "elapsed_s": run.elapsed_s,
        }
