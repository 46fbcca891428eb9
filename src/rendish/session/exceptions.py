"""Error types for the session cache."""

from __future__ import annotations

from rendish.errors import RendishError


class SessionError(RendishError):
    """Session cache error."""


class SessionErrorCodes:
    """Error code constants for SessionError."""

    READ_FAILED: str = "READ_FAILED"
    WRITE_FAILED: str = "WRITE_FAILED"
    CORRUPT_CACHE: str = "CORRUPT_CACHE"
