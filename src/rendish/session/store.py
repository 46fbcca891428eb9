"""On-disk session cache."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import structlog
from pydantic import ValidationError

from .exceptions import SessionError, SessionErrorCodes
from .models import Session

logger = structlog.stdlib.get_logger(__name__)


class SessionStore:
    """A single JSON cache file plus the session currently held in memory.

    The file is overwritten wholesale by :meth:`save`. There is no locking;
    the last writer wins.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._session: Session | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def session(self) -> Session | None:
        return self._session

    def load(self, now: datetime | None = None) -> Session | None:
        """Return the cached session if it has not expired.

        An expired cache is ignored but left on disk.

        Raises:
            SessionError: the file exists but cannot be read or parsed
        """
        if not self._path.exists():
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise SessionError(
                code=SessionErrorCodes.READ_FAILED,
                message=f"Failed to read session cache: {self._path}",
                cause=e,
            ) from e
        try:
            session = Session.model_validate_json(text)
        except ValidationError as e:
            raise SessionError(
                code=SessionErrorCodes.CORRUPT_CACHE,
                message=f"Session cache is not valid, sign in again to replace it: {self._path}",
                cause=e,
            ) from e
        if not session.is_valid(now):
            logger.info("session.expired", expires_at=session.expires_at)
            return None
        self._session = session
        return session

    def save(self, session: Session) -> None:
        """Overwrite the cache file with ``session``.

        Raises:
            SessionError: the file cannot be written
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(session.to_json(), encoding="utf-8")
        except OSError as e:
            raise SessionError(
                code=SessionErrorCodes.WRITE_FAILED,
                message=f"Failed to write session cache: {self._path}",
                cause=e,
            ) from e
        self._session = session
        logger.debug("session.saved", path=str(self._path), expires_at=session.expires_at)

    def clear(self) -> None:
        """Forget the session and delete the cache file."""
        self._session = None
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise SessionError(
                code=SessionErrorCodes.WRITE_FAILED,
                message=f"Failed to delete session cache: {self._path}",
                cause=e,
            ) from e
