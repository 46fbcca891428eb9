"""Error types for configuration loading."""

from __future__ import annotations

from rendish.errors import RendishError


class ConfigError(RendishError):
    """Configuration could not be loaded."""


class ConfigErrorCodes:
    """Error code constants for ConfigError."""

    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"
    NO_HOME: str = "NO_HOME_ERROR"
