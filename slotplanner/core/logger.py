"""
Logging configuration for slotplanner.

Uses loguru for structured, colorful logging with rotation and filtering.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .config import SlotPlannerConfig

# Project root for log files
PROJECT_ROOT = Path(__file__).parent.parent.parent
LOG_DIR = PROJECT_ROOT / "data" / "logs"


def setup_logging(config: SlotPlannerConfig | None = None, log_to_file: bool = True) -> None:
    """
    Configure logging for slotplanner.

    The engine modules only emit records; sinks are installed here by the
    embedding application (the CLI runner calls this on start-up).

    Args:
        config: Optional configuration. If not provided, uses defaults.
        log_to_file: Also write daily rotated log files under data/logs.
    """
    logger.remove()

    log_level = "INFO"
    if config:
        log_level = config.general.log_level
        if config.general.debug:
            log_level = "DEBUG"

    # Console handler with colors
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=log_level,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            LOG_DIR / "slotplanner_{time:YYYY-MM-DD}.log",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation="00:00",  # Rotate at midnight
            retention="7 days",
            compression="zip",
            backtrace=True,
            diagnose=True,
        )

    logger.info("slotplanner logging initialized")


def get_logger(name: str) -> "logger":
    """
    Get a logger instance with a specific name.

    Args:
        name: The name for the logger (typically __name__).

    Returns:
        A loguru logger instance bound to the given name.
    """
    return logger.bind(name=name)


__all__ = ["logger", "setup_logging", "get_logger"]
