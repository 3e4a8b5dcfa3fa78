"""Logging configuration utilities.

movetree is a library, so its loguru messages are disabled on import (see
``movetree/__init__.py``). Applications opt in by calling
:func:`setup_logging`, which also re-enables the ``movetree`` namespace.
"""

import sys
from pathlib import Path

from loguru import logger

from movetree.core.configs.schema import LoggingConfig

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "1 week",
) -> None:
    """Configure loguru sinks and enable movetree's messages.

    Args:
        level: Minimum log level to display.
        log_file: Optional path to a log file.
        rotation: When to rotate the log file.
        retention: How long to keep old log files.
    """
    logger.remove()
    logger.enable("movetree")

    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            rotation=rotation,
            retention=retention,
        )

    logger.debug(f"Logging configured at level: {level}")


def setup_logging_from_config(config: LoggingConfig) -> None:
    """Configure logging from a :class:`LoggingConfig`."""
    setup_logging(level=config.level, log_file=config.file)
