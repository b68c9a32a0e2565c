"""
Configuration management for slotplanner.

This module handles loading and validating configuration from YAML files
and environment variables using Pydantic for type safety.

The engine never reads this module directly: callers resolve the timezone
and horizon here and pass them into every entry point explicitly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"


class GeneralConfig(BaseModel):
    """General configuration."""
    name: str = "slotplanner"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


class SchedulingConfig(BaseModel):
    """Scheduling defaults handed to the engine by its callers."""
    timezone: str = "Australia/Sydney"
    horizon_days: int = Field(default=28, ge=1, le=366)
    adhoc_max_slots: int = Field(default=3, ge=1)
    alternatives_per_missing_session: int = Field(default=3, ge=1)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject names the IANA database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class CalendarConfig(BaseModel):
    """Calendar collaborator settings (used when building event payloads)."""
    calendar_id: str = "primary"
    reminder_minutes: int = Field(default=30, ge=0)
    send_updates: str = Field(default="none", pattern="^(all|externalOnly|none)$")


class SlotPlannerConfig(BaseModel):
    """Main slotplanner configuration."""
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)


class EnvSettings(BaseSettings):
    """Environment variables settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timezone: Optional[str] = Field(default=None, alias="SLOTPLANNER_TIMEZONE")
    log_level: Optional[str] = Field(default=None, alias="SLOTPLANNER_LOG_LEVEL")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


def load_yaml_config(config_path: Path | str | None = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    if config_path is None:
        config_path = CONFIG_DIR / "settings.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {config_path}")
    return data


def get_config(
    config_path: Path | str | None = None,
    env_settings: EnvSettings | None = None,
) -> SlotPlannerConfig:
    """
    Load and return the slotplanner configuration.

    Merges YAML configuration with environment variables; the environment
    wins for the timezone and log level.
    """
    yaml_config = load_yaml_config(config_path)
    env_settings = env_settings or get_env_settings()

    if env_settings.timezone:
        yaml_config.setdefault("scheduling", {})["timezone"] = env_settings.timezone
    if env_settings.log_level:
        yaml_config.setdefault("general", {})["log_level"] = env_settings.log_level

    try:
        return SlotPlannerConfig(**yaml_config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def get_env_settings() -> EnvSettings:
    """Get environment settings."""
    return EnvSettings()


# Global configuration instances (lazy loaded)
_config: Optional[SlotPlannerConfig] = None
_env_settings: Optional[EnvSettings] = None


def config() -> SlotPlannerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = get_config()
    return _config


def env() -> EnvSettings:
    """Get the global environment settings instance."""
    global _env_settings
    if _env_settings is None:
        _env_settings = get_env_settings()
    return _env_settings
