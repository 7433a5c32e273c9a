# tests/test_logging.py

"""
Tests for the application logger setup.
"""

import logging

from core.logging_config import LOGGER_NAME, NOISY_LOGGERS, setup_logger


def test_setup_logger_is_idempotent():
    first = setup_logger()
    second = setup_logger()

    assert first is second
    assert first.name == LOGGER_NAME
    assert len(second.handlers) == 1


def test_level_comes_from_argument():
    logger = setup_logger("debug")
    assert logger.level == logging.DEBUG

    logger = setup_logger("not-a-level")
    assert logger.level == logging.INFO


def test_http_client_loggers_are_quieted():
    setup_logger()

    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
