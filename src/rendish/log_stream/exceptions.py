"""Error types for the log stream."""

from __future__ import annotations

from rendish.errors import RendishError


class LogStreamError(RendishError):
    """Log stream error."""


class LogStreamErrorCodes:
    """Error code constants for LogStreamError."""

    NOT_CONNECTED: str = "NOT_CONNECTED"
    ALREADY_CONNECTED: str = "ALREADY_CONNECTED"
    CONNECTION_FAILED: str = "CONNECTION_FAILED"
    CLOSED: str = "CLOSED"
    TIMEOUT: str = "TIMEOUT"
