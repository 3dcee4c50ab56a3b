"""Tests for logging configuration."""

import logging

from ghconfig.logging_config import LOGGER_NAME, get_logger, setup_logging
from ghconfig.repository import resolve_repository
from ghconfig.settings import Settings


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_library_logger_has_null_handler():
    assert any(isinstance(h, logging.NullHandler) for h in get_logger().handlers)


def test_library_use_prints_nothing_unless_configured(monkeypatch):
    """Without setup_logging, warnings must not reach the last-resort handler."""
    fallback = RecordingHandler()
    monkeypatch.setattr(logging, "lastResort", fallback)
    monkeypatch.setattr(get_logger(), "propagate", False)

    assert resolve_repository(Settings({"github.repository": "widgets"})) == "widgets"
    assert fallback.records == []


def test_setup_logging_adds_stream_handler():
    logger = setup_logging(verbose=True)
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert any(type(h) is logging.StreamHandler for h in logger.handlers)
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_setup_logging_does_not_duplicate_handlers():
    setup_logging()
    logger = setup_logging()
    assert sum(type(h) is logging.StreamHandler for h in logger.handlers) == 1
    assert logger.level in (logging.INFO, logging.DEBUG)
