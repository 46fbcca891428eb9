"""Configuration models (pydantic BaseModel)."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from rendish.graphql_client import DEFAULT_GRAPHQL_URL, GraphQlConfig
from rendish.log_stream import DEFAULT_ORIGIN, DEFAULT_WEBSOCKET_URL, WsConfig
from rendish.log_stream.types import DEFAULT_DIRECTION, DEFAULT_HISTORY_MINUTES, DEFAULT_REGION


class ApiSection(BaseModel):
    """Remote endpoints. Timeouts default to none at all."""

    graphql_url: str = DEFAULT_GRAPHQL_URL
    websocket_url: str = DEFAULT_WEBSOCKET_URL
    origin: str = DEFAULT_ORIGIN
    timeout_seconds: float | None = Field(default=None, gt=0)


class LogsSection(BaseModel):
    """Defaults for ``logs tail``."""

    region: str = DEFAULT_REGION
    history_minutes: int = Field(default=DEFAULT_HISTORY_MINUTES, ge=0)
    page_size: int | None = Field(default=None, ge=1)
    direction: Literal["backward", "forward"] | None = DEFAULT_DIRECTION
    handshake_timeout_seconds: float | None = Field(default=None, gt=0)


class SessionSection(BaseModel):
    """Session cache location, relative to the config directory unless absolute."""

    cache_file: str = "token.json"


class LogSection(BaseModel):
    level: str = "WARNING"
    format: Literal["json", "text"] = "text"


class ObservabilitySection(BaseModel):
    log: LogSection = Field(default_factory=LogSection)


class AppConfig(BaseModel):
    """Whole application configuration."""

    api: ApiSection = Field(default_factory=ApiSection)
    logs: LogsSection = Field(default_factory=LogsSection)
    session: SessionSection = Field(default_factory=SessionSection)
    observability: ObservabilitySection = Field(default_factory=ObservabilitySection)

    def session_cache_path(self, config_dir: Path) -> Path:
        path = Path(self.session.cache_file).expanduser()
        return path if path.is_absolute() else config_dir / path

    def graphql_config(self) -> GraphQlConfig:
        return GraphQlConfig(url=self.api.graphql_url, timeout_seconds=self.api.timeout_seconds)

    def ws_config(self) -> WsConfig:
        return WsConfig(
            url=self.api.websocket_url,
            origin=self.api.origin,
            handshake_timeout_seconds=self.logs.handshake_timeout_seconds,
        )
