"""Core modules for slotplanner."""

from .config import (
    CONFIG_DIR,
    DATA_DIR,
    PROJECT_ROOT,
    SlotPlannerConfig,
    config,
    env,
    get_config,
)
from .errors import ConfigurationError, get_error_message
from .logger import get_logger, setup_logging

__all__ = [
    "CONFIG_DIR",
    "DATA_DIR",
    "PROJECT_ROOT",
    "SlotPlannerConfig",
    "config",
    "env",
    "get_config",
    "ConfigurationError",
    "get_error_message",
    "get_logger",
    "setup_logging",
]
