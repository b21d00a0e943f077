"""Logging configuration for rexsudo.

The wrapper must not add output of its own to a normal run, so the default
level is WARNING and everything goes to stderr. Raising the verbosity is an
opt-in through REX_SUDO_LOG_LEVEL or the config file.
"""
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = 'run-with-sudo: %(levelname)s: %(message)s'


def parse_level(name: str) -> int:
    """Translate a level name such as 'debug' into a logging constant.

    Raises:
        ValueError: if the name is not a standard logging level.
    """
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logging(
    level: int = logging.WARNING,
    format_string: Optional[str] = None
) -> None:
    """Configure the root logger to write to stderr.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Custom format string (uses default if None).
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    root_logger.addHandler(console_handler)


def setup_wrapper_logging(level_name: str) -> None:
    """Convenience setup for the wrapper entry point."""
    setup_logging(level=parse_level(level_name))


def flush_handlers() -> None:
    """Flush every root handler; nothing runs after the process image is replaced."""
    for handler in logging.getLogger().handlers:
        handler.flush()
