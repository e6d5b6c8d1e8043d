"""Error hierarchy shared by the probe engine and the command line."""

from __future__ import annotations


class StratumPingError(Exception):
    """Base class for every error raised by stratum-ping."""


class ConfigurationError(StratumPingError):
    """Fatal: raised before any network I/O and aborts the whole run."""


class InvalidAddress(ConfigurationError):
    pass


class ResolutionError(ConfigurationError):
    pass


class InvalidProtocol(ConfigurationError):
    def __init__(self, variant: str):
        super().__init__(f"Invalid stratum protocol version specified: {variant!r}")
        self.variant = variant


class InvalidSetting(ConfigurationError):
    pass


class TooManySamples(ConfigurationError):
    def __init__(self, count: int, limit: int):
        super().__init__(f"Invalid count replies specified: {count} (maximum is {limit})")
        self.count = count
        self.limit = limit


class ProbeError(StratumPingError):
    """A single attempt failed. The sampling loop counts it and moves on."""


class ConnectError(ProbeError):
    pass


class ProbeTimeout(ProbeError):
    pass


class TLSHandshakeError(ProbeError):
    pass


class SerializationError(ProbeError):
    pass
