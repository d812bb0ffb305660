"""Tests for the package logging helper."""

from __future__ import annotations

import logging

from pymupdf_lattice.logging_config import PACKAGE_LOGGER_NAME, get_logger


def test_module_loggers_share_the_package_handler():
    first = get_logger(f"{PACKAGE_LOGGER_NAME}.lattice")
    second = get_logger(f"{PACKAGE_LOGGER_NAME}.api")
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    assert first.handlers == []
    assert second.handlers == []
    assert first.propagate
    assert len(package_logger.handlers) == 1


def test_repeated_calls_do_not_add_handlers():
    get_logger(f"{PACKAGE_LOGGER_NAME}.page")
    get_logger(f"{PACKAGE_LOGGER_NAME}.page")

    assert len(logging.getLogger(PACKAGE_LOGGER_NAME).handlers) == 1
