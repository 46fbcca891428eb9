"""Configuration file loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError, ConfigErrorCodes
from .merger import deep_merge
from .models import AppConfig

CONFIG_DIR_ENV = "RENDISH_CONFIG_DIR"
CONFIG_FILE_NAME = "config.yaml"


def config_dir() -> Path:
    """``$RENDISH_CONFIG_DIR``, else ``$HOME/.config/rendish``."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    home = os.environ.get("HOME")
    if not home:
        raise ConfigError(
            code=ConfigErrorCodes.NO_HOME,
            message=f"HOME environment variable must be set (or {CONFIG_DIR_ENV})",
        )
    return Path(home) / ".config" / "rendish"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=ConfigErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Config file must contain a mapping: {path}",
        )
    return data


def load(path: Path | None = None, overrides: dict[str, Any] | None = None) -> AppConfig:
    """Load ``path`` (defaults if it does not exist) with ``overrides`` on top.

    An explicitly given ``path`` that is missing is an error; the default
    location is optional.
    """
    if path is None:
        default_path = config_dir() / CONFIG_FILE_NAME
        data = _read_yaml(default_path) if default_path.exists() else {}
    else:
        data = _read_yaml(path)
    if overrides:
        data = deep_merge(data, overrides)
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=ConfigErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
