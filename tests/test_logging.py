"""Test the centralized logging functionality."""

import logging
from io import StringIO

from pathfinder.logging import (
    get_logger,
    level_name,
    set_global_log_level,
    set_level_from_name,
    setup_root_logger,
)


def test_child_logger_follows_package_level():
    set_global_log_level(logging.INFO)
    logger = get_logger("pathfinder.test")

    log_capture = StringIO()
    handler = logging.StreamHandler(log_capture)
    handler.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    try:
        logger.info("Test info message")
        logger.debug("Test debug message")
        assert "Test info message" in log_capture.getvalue()
        assert "Test debug message" not in log_capture.getvalue()

        set_global_log_level(logging.DEBUG)
        logger.debug("Test debug message after enable")
        assert "Test debug message after enable" in log_capture.getvalue()
    finally:
        logger.removeHandler(handler)
        set_global_log_level(logging.INFO)


def test_logger_naming():
    logger = get_logger("pathfinder.explorer.test")
    assert logger.name == "pathfinder.explorer.test"
    assert logger.getEffectiveLevel() == logging.getLogger("pathfinder").level


def test_level_name_roundtrip():
    set_global_log_level(logging.WARNING)
    assert level_name() == "WARNING"

    set_level_from_name("debug")
    assert logging.getLogger("pathfinder").level == logging.DEBUG

    set_level_from_name("not-a-level")
    assert logging.getLogger("pathfinder").level == logging.INFO

    set_level_from_name(None)
    assert logging.getLogger("pathfinder").level == logging.INFO


def test_single_handler():
    setup_root_logger()
    setup_root_logger()
    assert len(logging.getLogger("pathfinder").handlers) == 1

    custom = logging.StreamHandler(StringIO())
    setup_root_logger(level=logging.DEBUG, handler=custom, force=True)
    root = logging.getLogger("pathfinder")
    assert root.handlers == [custom]
    assert root.level == logging.DEBUG

    setup_root_logger(force=True)
    assert len(root.handlers) == 1
    assert root.level == logging.INFO
