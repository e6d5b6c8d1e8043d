"""Centralized logging configuration."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import AppConfig, ensure_dir

LOG_FILE_NAME = "stratum-ping.log"


def configure_logging(config: AppConfig, level: Optional[str] = None) -> None:
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    level_name = (level or config.logging.level).upper()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.ERROR))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    # stderr keeps the ping report on stdout clean
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.logging.to_file:
        log_path = ensure_dir(config.paths.logs_dir) / LOG_FILE_NAME
        file_handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
