"""WebSocket transport abstraction."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from enum import Enum, auto

import structlog
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, InvalidHandshake, InvalidURI

from .config import WsConfig
from .exceptions import LogStreamError, LogStreamErrorCodes

logger = structlog.stdlib.get_logger(__name__)


class ConnectionState(Enum):
    """WebSocket connection state."""

    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    CLOSING = auto()


class WsClient(ABC):
    """Abstract WebSocket client.

    ``receive`` raises ``LogStreamError(CLOSED)`` when the peer closes the
    socket normally and ``LogStreamError(CONNECTION_FAILED)`` otherwise.
    """

    @abstractmethod
    async def connect(self, token: str) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    async def send(self, message: str) -> None:
        ...

    @abstractmethod
    async def receive(self) -> str | bytes:
        ...

    @property
    @abstractmethod
    def state(self) -> ConnectionState:
        ...


def _closed_error(e: ConnectionClosed) -> LogStreamError:
    if isinstance(e, ConnectionClosedOK):
        return LogStreamError(LogStreamErrorCodes.CLOSED, f"Connection closed: {e}", cause=e)
    return LogStreamError(LogStreamErrorCodes.CONNECTION_FAILED, f"Connection lost: {e}", cause=e)


class WebsocketsWsClient(WsClient):
    """``websockets``-backed client.

    The bearer token goes into the opening handshake headers; the
    application-level init message is the caller's job.
    """

    def __init__(self, config: WsConfig | None = None) -> None:
        self._config = config or WsConfig()
        self._state = ConnectionState.DISCONNECTED
        self._conn: ClientConnection | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    def _connection(self) -> ClientConnection:
        if self._conn is None or self._state != ConnectionState.CONNECTED:
            raise LogStreamError(LogStreamErrorCodes.NOT_CONNECTED, "Not connected")
        return self._conn

    async def connect(self, token: str) -> None:
        if self._state in (ConnectionState.CONNECTED, ConnectionState.CONNECTING):
            raise LogStreamError(LogStreamErrorCodes.ALREADY_CONNECTED, "Already connected")
        self._state = ConnectionState.CONNECTING
        logger.debug("ws.connecting", url=self._config.url)
        try:
            self._conn = await connect(
                self._config.url,
                additional_headers={"Authorization": f"Bearer {token}"},
                origin=self._config.origin,
                open_timeout=self._config.handshake_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self._state = ConnectionState.DISCONNECTED
            raise LogStreamError(
                LogStreamErrorCodes.TIMEOUT,
                f"Socket did not open within {self._config.handshake_timeout_seconds}s",
                cause=e,
            ) from e
        except (OSError, InvalidHandshake, InvalidURI) as e:
            self._state = ConnectionState.DISCONNECTED
            raise LogStreamError(
                LogStreamErrorCodes.CONNECTION_FAILED,
                f"Failed to connect to {self._config.url}: {e}",
                cause=e,
            ) from e
        self._state = ConnectionState.CONNECTED
        logger.debug("ws.connected", url=self._config.url)

    async def disconnect(self) -> None:
        if self._conn is None:
            self._state = ConnectionState.DISCONNECTED
            return
        self._state = ConnectionState.CLOSING
        try:
            await self._conn.close()
        finally:
            self._conn = None
            self._state = ConnectionState.DISCONNECTED

    async def send(self, message: str) -> None:
        conn = self._connection()
        try:
            await conn.send(message)
        except ConnectionClosed as e:
            self._state = ConnectionState.DISCONNECTED
            raise _closed_error(e) from e

    async def receive(self) -> str | bytes:
        conn = self._connection()
        try:
            return await conn.recv()
        except ConnectionClosed as e:
            self._state = ConnectionState.DISCONNECTED
            raise _closed_error(e) from e


class InMemoryWsClient(WsClient):
    """In-memory WebSocket client for testing.

    Injected frames are delivered in order; once they run out the socket
    behaves as if the server closed it.
    """

    def __init__(self) -> None:
        self._state = ConnectionState.DISCONNECTED
        self._recv_queue: asyncio.Queue[str | bytes | LogStreamError] = asyncio.Queue()
        self._sent_messages: list[str] = []
        self.token: str | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    async def connect(self, token: str) -> None:
        if self._state in (ConnectionState.CONNECTED, ConnectionState.CONNECTING):
            raise LogStreamError(LogStreamErrorCodes.ALREADY_CONNECTED, "Already connected")
        self.token = token
        self._state = ConnectionState.CONNECTED

    async def disconnect(self) -> None:
        self._state = ConnectionState.CLOSING
        self._state = ConnectionState.DISCONNECTED

    async def send(self, message: str) -> None:
        if self._state != ConnectionState.CONNECTED:
            raise LogStreamError(LogStreamErrorCodes.NOT_CONNECTED, "Not connected")
        self._sent_messages.append(message)

    async def receive(self) -> str | bytes:
        if self._state != ConnectionState.CONNECTED:
            raise LogStreamError(LogStreamErrorCodes.NOT_CONNECTED, "Not connected")
        if self._recv_queue.empty():
            self._state = ConnectionState.DISCONNECTED
            raise LogStreamError(LogStreamErrorCodes.CLOSED, "Connection closed")
        item = self._recv_queue.get_nowait()
        if isinstance(item, LogStreamError):
            self._state = ConnectionState.DISCONNECTED
            raise item
        return item

    def inject_message(self, raw: str | bytes) -> None:
        self._recv_queue.put_nowait(raw)

    def inject_error(self, error: LogStreamError) -> None:
        self._recv_queue.put_nowait(error)

    def get_sent_messages(self) -> list[str]:
        return list(self._sent_messages)
