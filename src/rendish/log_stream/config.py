"""Log stream configuration."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WEBSOCKET_URL = "wss://api.render.com/graphql"
DEFAULT_ORIGIN = "https://dashboard.render.com"


@dataclass
class WsConfig:
    """WebSocket transport configuration.

    ``handshake_timeout_seconds`` bounds the socket opening and the wait for
    the first keepalive. ``None`` waits forever.
    """

    url: str = DEFAULT_WEBSOCKET_URL
    origin: str | None = DEFAULT_ORIGIN
    handshake_timeout_seconds: float | None = None
