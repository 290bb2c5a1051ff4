"""
Pytest configuration for the calibration tests.
"""

import logging

import pytest

from utils.logging_config import LOGGER_NAMESPACES


@pytest.fixture(autouse=True)
def reset_loggers():
    """Drop handlers installed by setup_logging so they don't outlive captured streams."""
    yield
    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
