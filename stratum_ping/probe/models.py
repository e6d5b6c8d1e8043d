"""Shared dataclasses for the probe engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import InvalidProtocol, InvalidSetting


class ProtocolVariant(str, enum.Enum):
    V1 = "stratum1"
    V2 = "stratum2"

    @classmethod
    def parse(cls, value) -> "ProtocolVariant":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidProtocol(str(value)) from exc


@dataclass(frozen=True)
class Endpoint:
    host: str
    address: Tuple[Any, ...]
    family: int

    @property
    def display_address(self) -> str:
        ip, port = self.address[0], self.address[1]
        if ":" in ip:
            return f"[{ip}]:{port}"
        return f"{ip}:{port}"


@dataclass(frozen=True)
class ProbeConfig:
    protocol: ProtocolVariant
    login: str = "X"
    password: str = "x"
    use_tls: bool = False
    timeout: float = 10.0
    sample_count: int = 5
    include_connect: bool = False

    @classmethod
    def from_settings(
        cls,
        proto: str,
        login: str,
        password: str,
        use_tls: bool,
        timeout: float,
        sample_count: int,
        include_connect: bool = False,
    ) -> "ProbeConfig":
        variant = ProtocolVariant.parse(proto)
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as exc:
            raise InvalidSetting(f"invalid timeout: {timeout!r}") from exc
        try:
            sample_count = int(sample_count)
        except (TypeError, ValueError) as exc:
            raise InvalidSetting(f"invalid sample count: {sample_count!r}") from exc
        if timeout <= 0:
            raise InvalidSetting(f"timeout must be positive, got {timeout:g}")
        return cls(
            protocol=variant,
            login=login,
            password=password,
            use_tls=use_tls,
            timeout=timeout,
            sample_count=sample_count,
            include_connect=include_connect,
        )


@dataclass(frozen=True)
class Request:
    id: int
    method: str
    params: List[str] = field(default_factory=list)


@dataclass
class Statistics:
    """Running aggregate over one sampling run. Durations are in seconds."""

    attempted: int = 0
    succeeded: int = 0
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    total: float = 0.0
    elapsed: float = 0.0

    def record_success(self, duration: float) -> None:
        self.attempted += 1
        self.succeeded += 1
        self.total += duration
        if self.minimum is None or duration < self.minimum:
            self.minimum = duration
        if self.maximum is None or duration > self.maximum:
            self.maximum = duration

    def record_failure(self) -> None:
        self.attempted += 1

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def average(self) -> Optional[float]:
        if self.succeeded == 0:
            return None
        return self.total / self.succeeded

    @property
    def loss_percent(self) -> int:
        # Truncating integer percentage.
        if self.attempted == 0:
            return 0
        return 100 * self.failed // self.attempted

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "transmitted": self.attempted,
            "received": self.succeeded,
            "failed": self.failed,
            "loss_percent": self.loss_percent,
        }
        if self.succeeded:
            payload.update(
                {
                    "min_ms": self.minimum * 1000,
                    "avg_ms": self.average * 1000,
                    "max_ms": self.maximum * 1000,
                    "elapsed_s": self.elapsed,
                }
            )
        return payload
