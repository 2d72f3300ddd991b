"""Centralized logging configuration for introlog."""

import logging
import sys
import threading
from typing import Optional, Union

from introlog.config import REPORTER_CONFIG

# Flag to track if we've already set up the root logger
_ROOT_LOGGER_CONFIGURED = False
_SETUP_LOCK = threading.Lock()


def parse_level(value: Union[int, str, None]) -> int:
    """Convert a level name, numeric string, or int into a logging level.

    Unknown names fall back to the configured default level.

    Args:
        value: Level as int (returned unchanged), name such as "debug", or digits.

    Returns:
        Integer logging level.
    """
    if isinstance(value, int):
        return value
    return REPORTER_CONFIG.parse_level(value)


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Set up the root introlog logger with a single handler.

    Only the first call has an effect; later calls return immediately.

    Args:
        level: Logging level. When omitted, the ``INTROLOG_LOG_LEVEL``
            environment variable is consulted, then the configured default (INFO).
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to StreamHandler on stderr).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    with _SETUP_LOCK:
        if _ROOT_LOGGER_CONFIGURED:
            return

        if level is None:
            level = REPORTER_CONFIG.level_from_env()

        root_logger = logging.getLogger(REPORTER_CONFIG.root_logger_name)
        root_logger.setLevel(level)

        # Clear any existing handlers to avoid duplicates
        root_logger.handlers.clear()

        if format_string is None:
            format_string = REPORTER_CONFIG.format_string

        # Diagnostics stay off stdout so host programs can keep it for output
        if handler is None:
            handler = logging.StreamHandler(sys.stderr)

        handler.setFormatter(logging.Formatter(format_string))
        root_logger.addHandler(handler)

        # Let logs propagate to root logger so pytest can capture them
        root_logger.propagate = True

        _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger with introlog's standard configuration.

    All loggers inherit from the root 'introlog' logger configuration.

    Args:
        name: Logger name (typically __name__ from calling module).

    Returns:
        Configured logger instance.
    """
    setup_root_logger()

    logger = logging.getLogger(name)

    # Child loggers carry no handlers and inherit their level
    logger.setLevel(logging.NOTSET)

    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Set the log level for all introlog loggers.

    Args:
        level: Logging level (e.g., logging.DEBUG or "debug").
    """
    setup_root_logger()

    value = parse_level(level)
    root_logger = logging.getLogger(REPORTER_CONFIG.root_logger_name)
    root_logger.setLevel(value)

    # Also update handlers to respect the new level
    for handler in root_logger.handlers:
        handler.setLevel(value)


def enable_debug_logging() -> None:
    """Enable debug logging, which makes DETAILED failure reports visible."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Disable debug logging, set to INFO level."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Reset logging configuration (mainly for testing)."""
    global _ROOT_LOGGER_CONFIGURED

    with _SETUP_LOCK:
        _ROOT_LOGGER_CONFIGURED = False

        root_logger = logging.getLogger(REPORTER_CONFIG.root_logger_name)
        root_logger.handlers.clear()
        root_logger.setLevel(logging.NOTSET)
