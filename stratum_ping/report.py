"""Human-readable and JSON rendering of probe runs."""

from __future__ import annotations

import json
import sys
from typing import IO, Optional

from .errors import ProbeError
from .probe.models import Endpoint, ProbeConfig, ProtocolVariant, Statistics


def format_duration(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.2f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.2f}ms"
    if seconds >= 1e-6:
        return f"{seconds * 1e6:.2f}µs"
    return f"{seconds * 1e9:.2f}ns"


class TextReporter:
    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream, flush=True)

    def start(self, endpoint: Endpoint, config: ProbeConfig) -> None:
        variant = ProtocolVariant.parse(config.protocol)
        credentials = ""
        if variant is ProtocolVariant.V1:
            credentials = f", credentials: {config.login}:{config.password}"
        self._print()
        self._print(f"[PING] {variant.value} {endpoint.host} ({endpoint.display_address})")
        self._print(f"tls: {str(config.use_tls).lower()}, timeout: {config.timeout:g}s{credentials}")
        self._print()

    def sample(self, endpoint: Endpoint, seq: int, elapsed: float) -> None:
        self._print(
            f"{endpoint.host} ({endpoint.display_address}): seq={seq}, time={format_duration(elapsed)}"
        )

    def failure(self, endpoint: Endpoint, seq: int, error: ProbeError) -> None:
        self._print(f"{endpoint.host} ({endpoint.display_address}): seq={seq}, error={error}")

    def finish(self, endpoint: Endpoint, config: ProbeConfig, stats: Statistics) -> None:
        self._print()
        self._print("[PING statistics]")
        self._print(
            "{:<7} | {:>15} | {:>12} | {:>10} | {:>9} |".format(
                "packets",
                f"{stats.attempted} transmitted",
                f"{stats.succeeded} received",
                f"{stats.failed} failed",
                f"{stats.loss_percent}% loss",
            )
        )
        if stats.succeeded:
            self._print(
                "{:<7} | {:>15} | {:>12} | {:>10} | {:<12}".format(
                    "time",
                    f"min={format_duration(stats.minimum)}",
                    f"avg={format_duration(stats.average)}",
                    f"max={format_duration(stats.maximum)}",
                    f"elapsed={format_duration(stats.elapsed)}",
                )
            )
        self._print()


class JsonReporter:
    """Stays quiet per sample and emits one JSON document at the end."""

    def __init__(self, stream: Optional[IO[str]] = None):
        self.stream = stream or sys.stdout

    def start(self, endpoint: Endpoint, config: ProbeConfig) -> None:
        pass

    def sample(self, endpoint: Endpoint, seq: int, elapsed: float) -> None:
        pass

    def failure(self, endpoint: Endpoint, seq: int, error: ProbeError) -> None:
        pass

    def finish(self, endpoint: Endpoint, config: ProbeConfig, stats: Statistics) -> None:
        document = {
            "host": endpoint.host,
            "address": endpoint.display_address,
            "protocol": ProtocolVariant.parse(config.protocol).value,
            "tls": config.use_tls,
            "timeout": config.timeout,
            "statistics": stats.to_dict(),
        }
        print(json.dumps(document, indent=2), file=self.stream, flush=True)
