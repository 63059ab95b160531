"""
Logging configuration using loguru.

Library code only calls ``loguru.logger``; sinks are configured once by the
application (the CLI does it via :func:`setup_logging_from_config`).
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from fitpulse.core.config import Config

LOG_FILE_NAME = "fitpulse.log"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    fmt: str = "<level>[{level.name}]</level> {message}",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Replace loguru's sinks with stderr plus an optional rotating file.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        fmt: Loguru format string for stderr.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)

    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}",
            rotation=rotation,
            retention=retention,
        )


def setup_logging_from_config(config: Config, verbose: bool = False) -> None:
    """Configure sinks from the ``logging`` section of *config*.

    ``verbose`` forces DEBUG regardless of the configured level.  A file sink
    is added only when ``logging.to_file`` is true.  Settings are read through
    the validated schema, so env overrides like ``FITPULSE_LOGGING__TO_FILE=false``
    are parsed as booleans.

    Raises:
        ConfigurationError: the logging or paths section is invalid.
    """
    settings = config.validated()
    level = "DEBUG" if verbose else settings.logging.level
    log_file = None
    if settings.logging.to_file:
        log_dir = settings.paths.log_dir or settings.paths.data_dir / "logs"
        log_file = os.path.join(log_dir, LOG_FILE_NAME)
    setup_logging(level=level, log_file=log_file)
