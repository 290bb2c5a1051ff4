"""
utils/logging_config.py
Purpose: Set up the console/file logger for the calibration tool
"""

import logging
import sys
from typing import Optional

LOGGER_NAMESPACES = ("core", "interfaces", "utils", "main")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Attach handlers to the loggers of this project's packages.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Avoid duplicate output when called twice
        for old in list(logger.handlers):
            old.close()
            logger.removeHandler(old)
        for handler in handlers:
            logger.addHandler(handler)

    logging.getLogger("main").debug("Logging initialized.")
