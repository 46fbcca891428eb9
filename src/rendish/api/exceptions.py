"""Error types for the resource queries."""

from __future__ import annotations

from rendish.errors import RendishError


class ApiError(RendishError):
    """Resource lookup failed for a reason other than the request itself."""


class ApiErrorCodes:
    """Error code constants for ApiError."""

    NO_TEAM: str = "NO_TEAM"
    NOT_FOUND: str = "NOT_FOUND"
    NO_SSH_ADDRESS: str = "NO_SSH_ADDRESS"
