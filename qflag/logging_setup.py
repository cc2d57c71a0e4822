"""Logging setup, debug state and utilities."""

import logging
import os

from .ansi import LogStyles

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]

_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


def _env_flag(name: str) -> bool:
    """Read a boolean environment variable ("0", "false", "no" and "off" are false)."""
    return os.environ.get(name, "").strip().lower() not in _FALSE_VALUES


class LogObjects:
    """Reusable objects for loggers."""

    debug: bool = _env_flag("QFLAG_DEBUG")
    handlers: list[logging.Handler] = []
    loggers: dict[str, logging.Logger] = {}


def is_debug() -> bool:
    """Return the current debug state."""
    return LogObjects.debug


def set_debug(value: bool) -> None:
    """Set the debug state."""
    LogObjects.debug = value


class ScreenLogFormatter(logging.Formatter):
    """A custom formatter, adding colors based on log level.

    Respects NO_COLOR environment variable and TTY detection.
    """

    def __init__(self) -> None:
        super().__init__()
        log_format = r"%(name)25s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        styles = LogStyles.for_stream()
        self._formatters = {
            logging.DEBUG: logging.Formatter(log_format),
            logging.INFO: logging.Formatter(log_format),
            logging.WARNING: logging.Formatter(styles.warning(log_format)),
            logging.ERROR: logging.Formatter(styles.error(log_format)),
            logging.CRITICAL: logging.Formatter(styles.critical(log_format)),
        }

    def format(self, record: logging.LogRecord) -> str:
        return self._formatters.get(record.levelno, self._formatters[logging.INFO]).format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Loggers returned by `get_logger` before this call are moved over to the
    new handlers; the previous handlers are closed.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    previous = list(LogObjects.handlers)
    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter())
    LogObjects.handlers.append(stream_handler)

    for logger in LogObjects.loggers.values():
        for handler in previous:
            logger.removeHandler(handler)
        for handler in LogObjects.handlers:
            logger.addHandler(handler)
    for handler in previous:
        handler.close()


def get_logger(name: str = "qflag", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name (str): logger's name
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    LogObjects.loggers[name] = logger
    attached = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
            attached = True
    if attached:
        logger.debug('Logger "%s" initialized', name)
    return logger
