"""Logging setup for the preview scripts."""

from __future__ import annotations

import logging
from pathlib import Path
import sys

from holland.config import LoggingConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "holland.log"


def configure_logging(config: LoggingConfig) -> None:
    """Log to stdout and, when ``log_dir`` is set, to ``<log_dir>/holland.log``."""
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.level!r}")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / LOG_FILENAME, mode="a", encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


__all__ = ["configure_logging"]
