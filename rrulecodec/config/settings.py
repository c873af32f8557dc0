"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "RRULECODEC_"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_directory: Optional[str] = Field(default=None, description="Directory for log files")
    file_prefix: str = Field(default="rrulecodec", description="Log file prefix")


class RRuleCodecSettings(BaseSettings):
    """Codec settings with environment variable and YAML support."""

    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)

    # Parsing behaviour
    strict_numbers: bool = Field(
        default=False,
        description="Reject non-integer tokens in numeric RRULE attributes instead of keeping them as text",
    )
    allow_bare_rules: bool = Field(
        default=True, description="Treat lines without a property name as an RRULE body"
    )
    allow_embedded_dtstart: bool = Field(
        default=True, description="Accept DTSTART/TZID embedded inside an RRULE body"
    )

    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "rrulecodec")

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    def __init__(self, **kwargs: Any) -> None:
        env_vars_set = set()
        for key in os.environ:
            if key.upper().startswith(ENV_PREFIX):
                env_vars_set.add(key[len(ENV_PREFIX) :].lower())

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set

        self._load_yaml_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find config file, checking the working directory first, then user home."""
        project_config = Path.cwd() / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _load_parser_settings(self, config_data: dict) -> None:
        """Load parsing behaviour flags from YAML data."""
        parser_settings = ["strict_numbers", "allow_bare_rules", "allow_embedded_dtstart"]

        for setting in parser_settings:
            if (
                setting in config_data
                and setting not in self._explicit_args
                and setting not in self._env_vars_set
            ):
                setattr(self, setting, config_data[setting])

    def _load_logging_config(self, config_data: dict) -> None:
        """Load logging configuration from YAML data."""
        if "logging" not in config_data or "logging" in self._explicit_args:
            return

        logging_config = config_data["logging"]
        logging_settings = [
            "console_level",
            "console_colors",
            "file_enabled",
            "file_directory",
            "file_prefix",
        ]
        for setting in logging_settings:
            if setting in logging_config:
                setattr(self.logging, setting, logging_config[setting])

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open() as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            self._load_parser_settings(config_data)
            self._load_logging_config(config_data)

        except (OSError, yaml.YAMLError) as e:
            # Don't fail if YAML loading fails, just continue with defaults/env vars
            logging.warning(f"Could not load YAML config from {config_file}: {e}")

    @property
    def config_file(self) -> Path:
        """Path to YAML configuration file."""
        return self.config_dir / "config.yaml"


_settings_instance: Optional[RRuleCodecSettings] = None


def get_settings() -> RRuleCodecSettings:
    """Get the global settings instance, creating it lazily if needed."""
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = RRuleCodecSettings()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
