"""Log stream client: live log tailing over a WebSocket subscription."""

from .client import LogStreamClient
from .config import DEFAULT_ORIGIN, DEFAULT_WEBSOCKET_URL, WsConfig
from .exceptions import LogStreamError, LogStreamErrorCodes
from .protocol import SubscriptionMachine, decode_frame
from .transport import ConnectionState, InMemoryWsClient, WebsocketsWsClient, WsClient
from .types import (
    LogFrame,
    LogLabel,
    LogQuery,
    StreamAction,
    StreamEvent,
    SubscriptionState,
)

__all__ = [
    "DEFAULT_ORIGIN",
    "DEFAULT_WEBSOCKET_URL",
    "ConnectionState",
    "InMemoryWsClient",
    "LogFrame",
    "LogLabel",
    "LogQuery",
    "LogStreamClient",
    "LogStreamError",
    "LogStreamErrorCodes",
    "StreamAction",
    "StreamEvent",
    "SubscriptionMachine",
    "SubscriptionState",
    "WebsocketsWsClient",
    "WsClient",
    "WsConfig",
    "decode_frame",
]
