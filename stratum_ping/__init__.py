"""Application bootstrap helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import AppConfig, load_config
from .db import init_db
from .exporter import CSVExporter
from .history import RunHistory
from .logging_setup import configure_logging

__version__ = "1.0.0"


class ApplicationContext:
    """Holds the configuration and the lazily opened history store."""

    def __init__(self, config: AppConfig, log_level: Optional[str] = None):
        self.config = config
        configure_logging(config, log_level)
        self._session_factory = None

    @property
    def Session(self):
        if self._session_factory is None:
            self._session_factory = init_db(self.config.paths.data_dir, self.config.storage.database)
        return self._session_factory

    @property
    def history(self) -> RunHistory:
        return RunHistory(self.Session)

    @property
    def exporter(self) -> CSVExporter:
        return CSVExporter(self.config, self.Session)


def bootstrap(config_path: Optional[str] = None, log_level: Optional[str] = None) -> ApplicationContext:
    """Load configuration and wire dependencies."""

    config_file = Path(config_path).resolve() if config_path else None
    config = load_config(str(config_file)) if config_file else load_config()
    return ApplicationContext(config, log_level)
