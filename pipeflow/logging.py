"""Package-wide logging setup for pipeflow.

Every module asks for its logger through :func:`get_logger`. All of them hang
off the single ``pipeflow`` logger, which owns the only handler.
"""

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "pipeflow"

#: Environment variable consulted once, when the root logger is first set up.
LOG_LEVEL_ENV = "PIPEFLOW_LOG_LEVEL"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_CONFIGURED = False


def parse_level(level: Union[int, str]) -> int:
    """Turn a level name such as ``"debug"`` or a numeric level into an int.

    Args:
        level: Level name (case-insensitive) or numeric logging level.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'")
    return value


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach one handler to the ``pipeflow`` logger.

    Repeated calls are no-ops until :func:`reset_logging` runs.

    Args:
        level: Logging level. Falls back to ``PIPEFLOW_LOG_LEVEL`` and then INFO.
        format_string: Format for the handler (default: timestamp, name, level).
        handler: Handler to install (default: stream handler on stdout).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    if level is None:
        level = parse_level(os.environ.get(LOG_LEVEL_ENV, "INFO"))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Keep propagation so pytest's caplog sees records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` under the configured ``pipeflow`` root.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger that inherits level and handler from the package root.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Change the level of the package root logger and its handlers."""
    setup_root_logger()
    numeric = parse_level(level)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric)
    for handler in root_logger.handlers:
        handler.setLevel(numeric)


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler so the next call configures it again (tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
