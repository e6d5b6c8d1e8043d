"""Transport-and-timing engine for Stratum round-trip probes."""

from .models import Endpoint, ProbeConfig, ProtocolVariant, Request, Statistics
from .prober import Prober
from .protocol import build_request
from .resolver import resolve_endpoint, split_server
from .sampler import MAX_SAMPLES, Reporter, SamplingLoop, validate_run
from .transport import open_stream

__all__ = [
    "Endpoint",
    "MAX_SAMPLES",
    "ProbeConfig",
    "Prober",
    "ProtocolVariant",
    "Reporter",
    "Request",
    "SamplingLoop",
    "Statistics",
    "build_request",
    "open_stream",
    "resolve_endpoint",
    "split_server",
    "validate_run",
]
