"""
Tests for the logging setup.
"""

import logging

from utils.logging_config import LOGGER_NAMESPACES, setup_logging


def _file_handlers():
    return [h for h in logging.getLogger("core").handlers if isinstance(h, logging.FileHandler)]


def test_handlers_attached_to_every_namespace(tmp_path):
    setup_logging(logging.DEBUG, str(tmp_path / "run.log"))

    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

    logging.getLogger("core.geometry").debug("hello from core")
    for handler in _file_handlers():
        handler.flush()
    assert "hello from core" in (tmp_path / "run.log").read_text(encoding="utf-8")


def test_repeated_setup_closes_previous_file_handler(tmp_path):
    setup_logging(log_file=str(tmp_path / "first.log"))
    first = _file_handlers()
    assert len(first) == 1

    setup_logging(log_file=str(tmp_path / "second.log"))
    second = _file_handlers()

    assert first[0].stream is None
    assert len(second) == 1
    assert second[0] is not first[0]
    for name in LOGGER_NAMESPACES:
        assert len(logging.getLogger(name).handlers) == 2
