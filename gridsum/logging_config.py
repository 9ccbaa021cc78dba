"""
Logging configuration helpers for gridsum.

The library is silent by default: the ``gridsum`` logger only carries a
``NullHandler``. Call one of the helpers below to see the engine's debug
output, for example::

    import gridsum

    gridsum.enable_console_logging(level="DEBUG")

or set ``GRIDSUM_LOGGING=DEBUG`` in the environment and call
``gridsum.configure_from_env()``.
"""

import logging
import os
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "gridsum"
ENV_LEVEL = "GRIDSUM_LOGGING"


def _get_level(level: Union[str, int]) -> int:
    """Convert a level name or number to a logging level constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers():
    """Remove and close every handler except the NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def enable_console_logging(level: Union[str, int] = "INFO",
                           format: str = DEFAULT_FORMAT,
                           date_format: str = DEFAULT_DATE_FORMAT) -> logging.StreamHandler:
    """
    Send gridsum log records to stderr.

    Replaces any handler installed by an earlier call.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or logging constant
        format: Log record format string
        date_format: Timestamp format string

    Returns:
        The installed handler
    """
    _clear_handlers()
    logger = _get_logger()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format, datefmt=date_format))
    logger.addHandler(handler)
    logger.setLevel(_get_level(level))
    return handler


def disable_logging():
    """Return to the silent default."""
    _clear_handlers()
    _get_logger().setLevel(logging.NOTSET)


def set_level(level: Union[str, int]):
    """Change the gridsum logger level without touching its handlers."""
    _get_logger().setLevel(_get_level(level))


def configure_from_env() -> Optional[logging.StreamHandler]:
    """
    Enable console logging when ``GRIDSUM_LOGGING`` names a level.

    Returns:
        The installed handler, or None if the variable is unset or empty
    """
    level = os.environ.get(ENV_LEVEL, "").strip()
    if not level:
        return None
    return enable_console_logging(level=level)
