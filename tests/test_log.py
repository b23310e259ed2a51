from __future__ import annotations

import logging

import pytest

from holland.config import LoggingConfig
from holland.log import LOG_FILENAME, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_configure_logging_writes_file(tmp_path, restore_root_logger) -> None:
    log_dir = tmp_path / "logs"

    configure_logging(LoggingConfig(level="debug", log_dir=str(log_dir)))
    logging.getLogger("holland.test").debug("cycle built")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert restore_root_logger.level == logging.DEBUG
    assert "cycle built" in (log_dir / LOG_FILENAME).read_text(encoding="utf-8")


def test_configure_logging_without_log_dir(restore_root_logger) -> None:
    configure_logging(LoggingConfig(level="WARNING", log_dir=""))

    assert restore_root_logger.level == logging.WARNING
    assert not any(isinstance(handler, logging.FileHandler) for handler in restore_root_logger.handlers)


def test_configure_logging_rejects_unknown_level(restore_root_logger) -> None:
    with pytest.raises(ValueError):
        configure_logging(LoggingConfig(level="LOUD", log_dir=""))
