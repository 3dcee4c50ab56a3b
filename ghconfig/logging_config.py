"""Logging for the package.

Library modules log to the ``ghconfig`` logger, which carries a
``NullHandler`` so nothing is printed unless the application configures
logging. The CLI opts in through ``setup_logging``.
"""

import logging
import os

LOGGER_NAME = "ghconfig"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Send package log records to stderr for CLI runs.

    Args:
        verbose: If True, log at DEBUG. Also checks the DEBUG env var.

    Returns:
        The package logger
    """
    level = logging.DEBUG if verbose or os.getenv("DEBUG") else logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Replace any handler from an earlier run, keeping the NullHandler
    logger.handlers = [h for h in logger.handlers if isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the package logger instance."""
    return logging.getLogger(LOGGER_NAME)
