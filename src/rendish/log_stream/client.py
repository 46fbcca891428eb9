"""Live log subscription over one WebSocket connection."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable

import structlog

from . import protocol
from .exceptions import LogStreamError, LogStreamErrorCodes
from .protocol import SubscriptionMachine
from .transport import WsClient
from .types import LogFrame, LogQuery, StreamAction, StreamEvent, SubscriptionState

logger = structlog.stdlib.get_logger(__name__)


class LogStreamClient:
    """Tails a service's logs.

    Frames are yielded in arrival order with no buffering. The stream ends
    when the server closes the socket; there is no reconnection.
    """

    def __init__(
        self,
        transport: WsClient,
        handshake_timeout_seconds: float | None = None,
    ) -> None:
        self._transport = transport
        self._handshake_timeout = handshake_timeout_seconds
        self._machine = SubscriptionMachine()

    @property
    def state(self) -> SubscriptionState:
        return self._machine.state

    async def _receive(self) -> str | bytes:
        if self._machine.state is not SubscriptionState.HANDSHAKING or self._handshake_timeout is None:
            return await self._transport.receive()
        try:
            return await asyncio.wait_for(self._transport.receive(), self._handshake_timeout)
        except asyncio.TimeoutError as e:
            self._machine.advance(StreamEvent.ERROR)
            raise LogStreamError(
                LogStreamErrorCodes.TIMEOUT,
                f"No keepalive within {self._handshake_timeout}s",
                cause=e,
            ) from e

    async def stream(self, token: str, query: LogQuery) -> AsyncIterator[LogFrame]:
        """Open the socket, subscribe, and yield log frames until it closes.

        Raises:
            LogStreamError: the socket could not be opened, failed, or the
                handshake timed out
        """
        log = logger.bind(resource_id=query.resource_id)
        # one machine per connection, even if the last stream was abandoned
        self._machine = SubscriptionMachine()
        try:
            await self._transport.connect(token)
        except LogStreamError:
            self._machine.advance(StreamEvent.ERROR)
            raise
        try:
            self._machine.advance(StreamEvent.OPENED)
            await self._transport.send(protocol.connection_init(token))
            log.debug("log_stream.handshaking")

            while True:
                try:
                    raw = await self._receive()
                except LogStreamError as e:
                    if e.code != LogStreamErrorCodes.CLOSED or self._machine.finished:
                        raise
                    self._machine.advance(StreamEvent.CLOSED)
                    log.info("log_stream.closed")
                    return

                event, frame = protocol.decode_frame(raw)
                action = self._machine.advance(event)
                if action is StreamAction.SEND_START:
                    await self._transport.send(protocol.start(query))
                    log.debug("log_stream.subscribed", owner_id=query.owner_id, region=query.region)
                elif action is StreamAction.EMIT and frame is not None:
                    yield frame
        except LogStreamError:
            if not self._machine.finished:
                self._machine.advance(StreamEvent.ERROR)
            raise
        finally:
            if not self._machine.finished:
                self._machine.advance(StreamEvent.CLOSED)
            await self._transport.disconnect()

    async def tail(self, token: str, query: LogQuery, sink: Callable[[LogFrame], None]) -> int:
        """Feed every frame to ``sink``; return how many were delivered."""
        count = 0
        async for frame in self.stream(token, query):
            sink(frame)
            count += 1
        return count
