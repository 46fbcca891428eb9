"""Session manager: sign-in, second factor and the on-disk session cache."""

from .exceptions import SessionError, SessionErrorCodes
from .models import Credential, Session, SessionState, User
from .manager import ChallengeResult, SessionManager
from .store import SessionStore

__all__ = [
    "ChallengeResult",
    "Credential",
    "Session",
    "SessionError",
    "SessionErrorCodes",
    "SessionManager",
    "SessionState",
    "SessionStore",
    "User",
]
