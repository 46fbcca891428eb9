"""Configuration: YAML file, command-line overrides, validated models."""

from .exceptions import ConfigError, ConfigErrorCodes
from .loader import CONFIG_DIR_ENV, CONFIG_FILE_NAME, config_dir, load
from .merger import deep_merge
from .models import (
    ApiSection,
    AppConfig,
    LogSection,
    LogsSection,
    ObservabilitySection,
    SessionSection,
)

__all__ = [
    "ApiSection",
    "AppConfig",
    "CONFIG_DIR_ENV",
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ConfigErrorCodes",
    "LogSection",
    "LogsSection",
    "ObservabilitySection",
    "SessionSection",
    "config_dir",
    "deep_merge",
    "load",
]
