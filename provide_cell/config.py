"""Configuration management for provide-cell."""

from typing import Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
import logging
import os

from .core.errors import ConfigurationError


class InfoConfig(BaseModel):
    """Configuration for rendering info trees."""

    width: int = Field(
        default=80,
        ge=20,
        description="Column at which info leaves are wrapped"
    )


class Config(BaseModel):
    """Main configuration object."""

    log_level: str = Field(
        default="WARNING",
        description="Level for the provide_cell logger"
    )
    info: InfoConfig = Field(default_factory=InfoConfig)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    def apply_log_level(self) -> None:
        """Apply the log level to the package logger."""
        logging.getLogger("provide_cell").setLevel(self.log_level)

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        config_dict = {}
        info_dict = {}

        if log_level := os.getenv("PROVIDE_CELL_LOG_LEVEL"):
            config_dict["log_level"] = log_level

        if width := os.getenv("PROVIDE_CELL_INFO_WIDTH"):
            try:
                info_dict["width"] = int(width)
            except ValueError:
                raise ConfigurationError(
                    f"PROVIDE_CELL_INFO_WIDTH must be an integer, got {width!r}",
                    config_key="info.width"
                )

        try:
            config = cls(info=InfoConfig(**info_dict), **config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

        # Leave the logger alone unless a level was asked for
        if "log_level" in config_dict:
            config.apply_log_level()
        return config


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
    config.apply_log_level()
