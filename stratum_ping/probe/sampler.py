"""Sequential sampling loop that tolerates per-attempt failures."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from ..errors import ProbeError, TooManySamples
from .models import Endpoint, ProbeConfig, ProtocolVariant, Statistics
from .prober import Prober

LOGGER = logging.getLogger(__name__)

MAX_SAMPLES = 2000
SAMPLE_INTERVAL = 1.0


class Reporter(Protocol):
    def start(self, endpoint: Endpoint, config: ProbeConfig) -> None: ...

    def sample(self, endpoint: Endpoint, seq: int, elapsed: float) -> None: ...

    def failure(self, endpoint: Endpoint, seq: int, error: ProbeError) -> None: ...

    def finish(self, endpoint: Endpoint, config: ProbeConfig, stats: Statistics) -> None: ...


class NullReporter:
    def start(self, endpoint: Endpoint, config: ProbeConfig) -> None:
        pass

    def sample(self, endpoint: Endpoint, seq: int, elapsed: float) -> None:
        pass

    def failure(self, endpoint: Endpoint, seq: int, error: ProbeError) -> None:
        pass

    def finish(self, endpoint: Endpoint, config: ProbeConfig, stats: Statistics) -> None:
        pass


def validate_run(config: ProbeConfig) -> ProtocolVariant:
    """Checks that must pass before any network activity."""

    variant = ProtocolVariant.parse(config.protocol)
    if config.sample_count > MAX_SAMPLES:
        raise TooManySamples(config.sample_count, MAX_SAMPLES)
    return variant


class SamplingLoop:
    def __init__(
        self,
        endpoint: Endpoint,
        config: ProbeConfig,
        reporter: Optional[Reporter] = None,
        prober: Optional[Prober] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.endpoint = endpoint
        self.config = config
        self.reporter = reporter or NullReporter()
        self.prober = prober or Prober(endpoint, config)
        self._sleep = sleep or time.sleep
        self._clock = clock

    def run(self) -> Statistics:
        variant = validate_run(self.config)

        LOGGER.info(
            "Probing %s (%s) %d times with %s, tls=%s",
            self.endpoint.host,
            self.endpoint.display_address,
            self.config.sample_count,
            variant.value,
            self.config.use_tls,
        )
        self.reporter.start(self.endpoint, self.config)

        stats = Statistics()
        started = self._clock()
        for seq in range(self.config.sample_count):
            try:
                elapsed = self.prober.probe()
            except ProbeError as exc:
                LOGGER.warning("Sample %d to %s failed: %s", seq, self.endpoint.display_address, exc)
                stats.record_failure()
                self.reporter.failure(self.endpoint, seq, exc)
            else:
                stats.record_success(elapsed)
                self.reporter.sample(self.endpoint, seq, elapsed)
            self._sleep(SAMPLE_INTERVAL)
        stats.elapsed = self._clock() - started

        LOGGER.info(
            "Finished %s: %d/%d replies, %d%% loss",
            self.endpoint.host,
            stats.succeeded,
            stats.attempted,
            stats.loss_percent,
        )
        self.reporter.finish(self.endpoint, self.config, stats)
        return stats
