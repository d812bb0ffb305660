"""Logging helpers shared by the lattice extraction modules."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER_NAME = "pymupdf_lattice"


def _configure_package_logger(level: int) -> logging.Logger:
    """Attach the package's single stream handler, once."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        package_logger.addHandler(handler)
        package_logger.setLevel(level)

    return package_logger


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Return a module logger that reports through the package logger.

    Module loggers carry no handlers of their own; records propagate to the
    package logger, which holds the only handler.
    """
    _configure_package_logger(level)
    return logging.getLogger(name)


__all__ = ["PACKAGE_LOGGER_NAME", "get_logger"]
