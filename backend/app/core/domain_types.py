"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - MemberId, SessionToken wrap str; domain signatures never take a bare str identity
    - CookieName values are the fixed wire keys; never spell a cookie key inline
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

MemberId = NewType("MemberId", str)
SessionToken = NewType("SessionToken", str)     # persisted session identifier
LocalSessionId = NewType("LocalSessionId", str)


# ─── Lifetimes ───────────────────────────────────────────────────

A_YEAR_SECONDS: int = 60 * 60 * 24 * 365


# ─── Enums ───────────────────────────────────────────────────────

class LoginMode(str, Enum):
    """Persistent keeps a durable server-side session; one-time keeps none."""
    PERSISTENT = "persistent"
    ONE_TIME = "one_time"

    @classmethod
    def from_flag(cls, persistent: bool) -> "LoginMode":
        return cls.PERSISTENT if persistent else cls.ONE_TIME


class CookieName(str, Enum):
    """The seven credential cookie keys, in write order."""
    ID = "id"
    NAME = "name"
    PHONE_NUMBER = "phoneNumber"
    IS_WORKER = "isWorker"
    SESSION_ID = "sessionId"
    IS_ADMIN = "isAdmin"
    IS_AUTO_LOGIN = "isAutoLogin"


class AuthErrorKind(str, Enum):
    """Semantic failure kinds — callers branch on these, not on message text."""
    NOT_FOUND = "not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    MALFORMED_COOKIE = "malformed_cookie"
    SESSION_INVALID = "session_invalid"
    CREDENTIALS_REQUIRED = "credentials_required"
    NOT_AUTHENTICATED = "not_authenticated"


class AuthEventKind(str, Enum):
    """Structured events emitted by the reconciler for observability."""
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_REJECTED = "login_rejected"
    CONSISTENCY_FAILED = "consistency_failed"
    FORCED_LOGOUT = "forced_logout"
    LOGOUT_COMPLETED = "logout_completed"
    SESSION_CLEARED = "session_cleared"
