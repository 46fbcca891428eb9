"""Session models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class Credential:
    """Primary sign-in credential. Never persisted."""

    identifier: str
    secret: str = field(repr=False)


class User(BaseModel):
    """Remote identity record.

    Only ``id`` and ``email`` are required; every other field the server sends
    is kept untouched so the record round-trips through the cache.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    email: str


class Session(BaseModel):
    """Bearer token, its expiry and the signed-in user.

    ``expires_at`` stays the exact string the server returned.
    """

    model_config = ConfigDict(populate_by_name=True)

    id_token: str = Field(alias="idToken")
    expires_at: str = Field(alias="expiresAt")
    user: User

    @field_validator("expires_at")
    @classmethod
    def _parseable_expiry(cls, value: str) -> str:
        datetime.fromisoformat(value)
        return value

    def expires_at_datetime(self) -> datetime:
        expires = datetime.fromisoformat(self.expires_at)
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires

    def is_valid(self, now: datetime | None = None) -> bool:
        """A session is usable strictly before its expiry."""
        now = now or datetime.now(timezone.utc)
        return now < self.expires_at_datetime()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class SessionState(Enum):
    """Authentication progress of a SessionManager."""

    NO_SESSION = auto()
    AWAITING_SECOND_FACTOR = auto()
    AUTHENTICATED = auto()
