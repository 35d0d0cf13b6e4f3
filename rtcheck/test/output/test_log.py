"""Tests for rtcheck.output.log module."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from rich.logging import RichHandler

from rtcheck.output.log import LOGGER_NAME, configure_logging


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_default_level_is_warning() -> None:
    configure_logging()
    assert logging.getLogger(LOGGER_NAME).level == logging.WARNING


def test_verbose_logs_debug() -> None:
    configure_logging(verbose=True)
    assert logging.getLogger("rtcheck.platform.process").isEnabledFor(logging.DEBUG)


def test_reconfiguring_replaces_handler() -> None:
    configure_logging()
    configure_logging(verbose=True)
    handlers = logging.getLogger(LOGGER_NAME).handlers
    assert sum(isinstance(h, RichHandler) for h in handlers) == 1
