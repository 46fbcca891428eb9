"""Two-step sign-in and session lifecycle."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog
from pydantic import BaseModel, ConfigDict, Field

from rendish.graphql_client import GraphQlClient, decode_field

from . import operations
from .models import Credential, Session, SessionState
from .store import SessionStore

logger = structlog.stdlib.get_logger(__name__)


class ChallengeResult(BaseModel):
    """The part of the ``signIn`` answer the second step needs."""

    model_config = ConfigDict(populate_by_name=True)

    id_token: str = Field(alias="idToken")


class SessionManager:
    """Drives ``NoSession -> AwaitingSecondFactor -> Authenticated``.

    There is no refresh: once a session expires the whole cycle restarts.
    Request errors propagate unchanged.
    """

    def __init__(self, client: GraphQlClient, store: SessionStore) -> None:
        self._client = client
        self._store = store
        self._awaiting_second_factor = False

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def state(self) -> SessionState:
        session = self._store.session
        if session is not None and session.is_valid():
            return SessionState.AUTHENTICATED
        if self._awaiting_second_factor:
            return SessionState.AWAITING_SECOND_FACTOR
        return SessionState.NO_SESSION

    async def sign_in(self, identifier: str, secret: str) -> str:
        """Verify the primary credential and return the challenge token."""
        data = await self._client.execute(operations.sign_in(identifier, secret))
        result = decode_field(data, "signIn", ChallengeResult)
        self._awaiting_second_factor = True
        logger.info("session.challenge_issued")
        return result.id_token

    async def complete_challenge(self, challenge_token: str, code: str) -> Session:
        """Exchange the challenge token and a one-time code for a session."""
        data = await self._client.execute(
            operations.verify_one_time_password(code), challenge_token
        )
        session = decode_field(data, "verifyOneTimePassword", Session)
        self._awaiting_second_factor = False
        logger.info("session.authenticated", user_id=session.user.id, expires_at=session.expires_at)
        return session

    async def authenticate(self, credential: Credential, code_prompt: Callable[[], str]) -> Session:
        """Full sign-in: credential, second factor, then persist.

        Nothing is written unless both steps succeed.
        """
        challenge_token = await self.sign_in(credential.identifier, credential.secret)
        session = await self.complete_challenge(challenge_token, code_prompt())
        self.save(session)
        return session

    async def ensure(
        self,
        credential_prompt: Callable[[], Credential],
        code_prompt: Callable[[], str],
    ) -> Session:
        """Return the cached session, signing in only when there is none."""
        session = self.load()
        if session is not None:
            return session
        return await self.authenticate(credential_prompt(), code_prompt)

    def load(self, now: datetime | None = None) -> Session | None:
        return self._store.load(now)

    def save(self, session: Session) -> None:
        self._store.save(session)
