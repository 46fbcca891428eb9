"""Error types raised by the GraphQL request executor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rendish.errors import RendishError

if TYPE_CHECKING:
    from .types import GraphQlQuery


class RequestError(RendishError):
    """Base class for every failed request/response exchange."""


class RequestErrorCodes:
    """Error code constants for RequestError."""

    TRANSPORT: str = "TRANSPORT_ERROR"
    PROTOCOL: str = "PROTOCOL_ERROR"
    TIMEOUT: str = "TIMEOUT_ERROR"
    UNKNOWN_OPERATION: str = "UNKNOWN_OPERATION"


class TransportError(RequestError):
    """Non-2xx status, or no HTTP response at all."""

    def __init__(
        self,
        message: str,
        request: GraphQlQuery,
        body: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(RequestErrorCodes.TRANSPORT, message, cause)
        self.request = request
        self.body = body
        self.status_code = status_code


class ProtocolError(RequestError):
    """2xx status with an unusable envelope or a non-empty ``errors`` array."""

    def __init__(
        self,
        message: str,
        errors: str = "",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(RequestErrorCodes.PROTOCOL, message, cause)
        self.errors = errors


class RequestTimeoutError(RequestError):
    """The configured deadline elapsed before a response arrived."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(RequestErrorCodes.TIMEOUT, message, cause)
