"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.pricing import FUEL_RATE
from .domain.slot_generator import ServiceHours

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ScheduleConfig(BaseModel):
    """Hours and days offered for booking."""
    first_hour: int = 9
    last_hour: int = 18
    window_days: int = 7

    @field_validator("first_hour", "last_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("window_days")
    @classmethod
    def validate_window(cls, value: int) -> int:
        """Ensure at least one day is bookable."""
        if value < 1:
            raise ValueError("window_days must be at least 1")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "ScheduleConfig":
        """The last slot cannot start before the first one."""
        if self.last_hour < self.first_hour:
            raise ValueError("last_hour must not be earlier than first_hour")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    storage_dir: Path = Path("~/.smartwash")
    timezone: str = "Asia/Kolkata"
    fuel_rate: float = FUEL_RATE
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    log_level: str = "WARNING"

    @field_validator("fuel_rate")
    @classmethod
    def validate_fuel_rate(cls, value: float) -> float:
        """Fuel cannot be charged at a negative rate."""
        if value < 0:
            raise ValueError(f"fuel_rate must be >= 0, got {value}")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject names missing from the timezone database."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalise and check the logging level name."""
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level

    def get_storage_dir(self) -> Path:
        """Storage directory with ``~`` expanded."""
        return self.storage_dir.expanduser()

    def get_service_hours(self) -> ServiceHours:
        """Service hours for the slot generator."""
        return ServiceHours(
            first_hour=self.schedule.first_hour,
            last_hour=self.schedule.last_hour,
            window_days=self.schedule.window_days,
            timezone=self.timezone,
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.cwd() / "config.yaml"


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load the configuration for a command.

    An explicitly given file must exist. Without one, ``./config.yaml`` is
    used when present and built-in defaults otherwise.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def configure_logging(config: AppConfig) -> None:
    """Route log records to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
