"""One timed Stratum round trip."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .jsonrpc import encode_request
from .models import Endpoint, ProbeConfig
from .protocol import build_request
from .transport import ByteStream, open_stream

LOGGER = logging.getLogger(__name__)

READ_BUFFER_SIZE = 512

StreamOpener = Callable[[Endpoint, bool, float], ByteStream]


class Prober:
    """Opens a fresh connection per attempt, sends one request and waits for any reply."""

    def __init__(
        self,
        endpoint: Endpoint,
        config: ProbeConfig,
        opener: Optional[StreamOpener] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.endpoint = endpoint
        self.config = config
        self._open = opener or open_stream
        self._clock = clock

    def probe(self) -> float:
        """Return the elapsed seconds of one attempt or raise ``ProbeError``."""

        config = self.config
        # Built before connecting so an unknown variant never costs a connection.
        request = build_request(config.protocol, config.login, config.password)
        payload = encode_request(request)

        connect_started = self._clock()
        with self._open(self.endpoint, config.use_tls, config.timeout) as stream:
            started = connect_started if config.include_connect else self._clock()
            stream.write_all(payload)
            reply = stream.read(READ_BUFFER_SIZE)
            elapsed = self._clock() - started

        LOGGER.debug(
            "%s replied with %d bytes after %.3f ms",
            self.endpoint.display_address,
            len(reply),
            elapsed * 1000,
        )
        return elapsed
