"""Configuration loading helpers for stratum-ping."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_NAME = "stratum-ping.yaml"


@dataclass
class PathsConfig:
    data_dir: Path
    logs_dir: Path


@dataclass
class PingDefaults:
    server: Optional[str] = None
    login: str = "X"
    password: str = "x"
    proto: str = "stratum2"
    count: int = 5
    timeout: float = 10.0
    tls: bool = False
    ipv6: bool = False
    include_connect: bool = False


@dataclass
class LoggingConfig:
    level: str = "ERROR"
    to_file: bool = False


@dataclass
class StorageConfig:
    enabled: bool = False
    database: str = "history.db"


@dataclass
class ExportConfig:
    csv_name: str = "runs.csv"


@dataclass
class AppConfig:
    root_dir: Path
    paths: PathsConfig
    ping: PingDefaults = field(default_factory=PingDefaults)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def _as_path(base: Path, maybe_path: Optional[str]) -> Path:
    if not maybe_path:
        raise ValueError("Path configuration entries cannot be empty")
    return (base / maybe_path).resolve()


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping")
    return section


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML, falling back to built-in defaults.

    An explicit ``path`` must exist. Without one, ``stratum-ping.yaml`` in the
    working directory is read when present.
    """

    if path:
        source_path = Path(path)
        if not source_path.exists():
            raise FileNotFoundError(f"Missing configuration file at {source_path}")
    else:
        source_path = Path.cwd() / DEFAULT_CONFIG_NAME

    data = {}
    if source_path.exists():
        with source_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        root_dir = source_path.resolve().parent
    else:
        root_dir = Path.cwd()

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {source_path} must contain a mapping")

    paths_data = _section(data, "paths")
    paths = PathsConfig(
        data_dir=_as_path(root_dir, paths_data.get("data_dir", "data")),
        logs_dir=_as_path(root_dir, paths_data.get("logs_dir", "logs")),
    )

    return AppConfig(
        root_dir=root_dir,
        paths=paths,
        ping=PingDefaults(**_section(data, "ping")),
        logging=LoggingConfig(**_section(data, "logging")),
        storage=StorageConfig(**_section(data, "storage")),
        export=ExportConfig(**_section(data, "export")),
    )
