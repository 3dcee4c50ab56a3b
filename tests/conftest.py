"""Shared pytest fixtures."""

import logging

import pytest

from ghconfig.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logger():
    """Undo handlers and level the CLI installs so they do not outlive a test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
