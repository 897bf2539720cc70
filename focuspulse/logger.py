"""Logging configuration for FocusPulse.

Uses loguru.  Library code only calls ``logger``; handlers are installed
by the entry point through :func:`setup_logging`.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Replace loguru's default sink with the FocusPulse console sink.

    Args:
        level: Minimum level for the console.
        log_file: Optional file that receives everything at DEBUG.
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper(), colorize=True)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="00:00",
            retention="7 days",
        )
    logger.debug("FocusPulse logging initialized at {}", level.upper())


__all__ = ["logger", "setup_logging"]
