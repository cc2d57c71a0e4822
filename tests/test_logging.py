"""Tests for logging setup and debug state."""

import logging
import os
from unittest.mock import patch

from qflag.logging_setup import LogObjects, ScreenLogFormatter, _env_flag, get_logger, init_logger, is_debug, set_debug


def _record(level: int, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("qflag.test", level, __file__, 1, msg, None, None)


def test_set_debug_roundtrip():
    """set_debug changes what is_debug reports."""
    previous = is_debug()
    try:
        set_debug(False)
        assert is_debug() is False
        set_debug(True)
        assert is_debug() is True
    finally:
        set_debug(previous)


def test_get_logger_level_follows_debug():
    """Loggers are at DEBUG level in debug mode and WARNING otherwise."""
    previous = is_debug()
    try:
        set_debug(True)
        assert get_logger("qflag.test.debug").level == logging.DEBUG
        set_debug(False)
        assert get_logger("qflag.test.quiet").level == logging.WARNING
    finally:
        set_debug(previous)


def test_get_logger_explicit_level():
    """An explicit level wins over the debug state."""
    assert get_logger("qflag.test.explicit", logging.ERROR).level == logging.ERROR


def test_get_logger_attaches_handlers_once():
    """Calling get_logger twice does not duplicate handlers."""
    first = get_logger("qflag.test.once")
    count = len(first.handlers)
    second = get_logger("qflag.test.once")
    assert first is second
    assert len(second.handlers) == count
    assert count == len(LogObjects.handlers)
    assert first.propagate is False


def test_init_logger_with_file(tmp_path):
    """A file handler is added when a filename is given."""
    try:
        init_logger(str(tmp_path / "qflag.log"))
        assert any(isinstance(h, logging.FileHandler) for h in LogObjects.handlers)
        init_logger()
        assert not any(isinstance(h, logging.FileHandler) for h in LogObjects.handlers)
    finally:
        init_logger("/dev/null")


def test_init_logger_twice_does_not_duplicate_output(tmp_path):
    """Existing loggers are moved to the new handlers, not given extra ones."""
    logger = get_logger("qflag.test.reinit", logging.INFO)
    log_file = tmp_path / "qflag.log"
    try:
        init_logger(str(log_file))
        init_logger(str(log_file))
        assert logger.handlers == LogObjects.handlers
        logger.info("once")
        for handler in logger.handlers:
            handler.flush()
        assert log_file.read_text().count("once") == 1
    finally:
        init_logger("/dev/null")
    assert logger.handlers == LogObjects.handlers


def test_env_flag():
    """QFLAG_DEBUG style variables accept the usual false spellings."""
    for value, expected in [("1", True), ("yes", True), ("0", False), ("False", False), ("off", False), ("", False)]:
        with patch.dict(os.environ, {"QFLAG_TEST_FLAG": value}, clear=False):
            assert _env_flag("QFLAG_TEST_FLAG") is expected
    assert _env_flag("QFLAG_TEST_UNSET_FLAG") is False


def test_screen_formatter_without_colors():
    """Without colors, warnings are printed as is."""
    previous = is_debug()
    try:
        set_debug(False)
        with patch.dict(os.environ, {"NO_COLOR": "1"}, clear=False):
            formatter = ScreenLogFormatter()
        assert formatter.format(_record(logging.WARNING)) == "hello"
    finally:
        set_debug(previous)


def test_screen_formatter_with_colors():
    """With colors forced, errors are wrapped in ANSI codes."""
    previous = is_debug()
    try:
        set_debug(False)
        with patch.dict(os.environ, {"FORCE_COLOR": "1", "NO_COLOR": ""}, clear=False):
            formatter = ScreenLogFormatter()
        assert formatter.format(_record(logging.ERROR)) == "\x1b[31;2mhello\x1b[0m"
        assert formatter.format(_record(logging.INFO)) == "hello"
    finally:
        set_debug(previous)
