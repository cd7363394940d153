"""Error Hierarchy — typed, categorized exceptions for all SessionGate failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Authentication errors carry an AuthErrorKind so callers branch on kind, not on text
    - MemberNotFoundError and InvalidCredentialsError share one client-facing message
    - MalformedCookieError IS a SessionInvalidError: a broken claim always resolves to inconsistent
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with SessionGateError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from app.core.domain_types import AuthErrorKind


AUTH_FAILED_MESSAGE = "Member id or password is not correct"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    member_id: str | None = None
    cookie_name: str | None = None
    debug_info: dict[str, Any] | None = None


class SessionGateError(Exception):
    """Base exception for all SessionGate errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


class AuthenticationError(SessionGateError):
    """Any failure of the authentication-state protocol."""
    kind: AuthErrorKind

    def __init__(
        self,
        message: str,
        kind: AuthErrorKind,
        context: ErrorContext | None = None,
        http_status: int = 401,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ):
        super().__init__(
            message, kind.name, ErrorCategory.AUTHENTICATION,
            severity, context, http_status,
        )
        self.kind = kind


# ─── Authentication Errors (400-level) ──────────────────────────

class MemberNotFoundError(AuthenticationError):
    """No member matches the id (or id + session token pair)."""
    def __init__(self, member_id: str | None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.member_id = member_id
        super().__init__(AUTH_FAILED_MESSAGE, AuthErrorKind.NOT_FOUND, ctx)


class InvalidCredentialsError(AuthenticationError):
    """Submitted password does not match the stored hash."""
    def __init__(self, member_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.member_id = member_id
        super().__init__(AUTH_FAILED_MESSAGE, AuthErrorKind.INVALID_CREDENTIALS, ctx)


class SessionInvalidError(AuthenticationError):
    """Persisted session does not match the cookie claim or has expired."""
    def __init__(
        self,
        message: str = "Member session is not valid",
        context: ErrorContext | None = None,
        kind: AuthErrorKind = AuthErrorKind.SESSION_INVALID,
    ):
        super().__init__(message, kind, context)


class MalformedCookieError(SessionInvalidError):
    """A cookie field required by the consistency check is absent."""
    def __init__(self, cookie_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.cookie_name = cookie_name
        super().__init__(
            f"Cookie '{cookie_name}' is empty", ctx,
            kind=AuthErrorKind.MALFORMED_COOKIE,
        )
        self.cookie_name = cookie_name


class CredentialsRequiredError(AuthenticationError):
    """Cookies are incomplete and no credentials were submitted."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Member id and password are required",
            AuthErrorKind.CREDENTIALS_REQUIRED, context, http_status=400,
            severity=ErrorSeverity.INFO,
        )


class NotAuthenticatedError(AuthenticationError):
    """No member is attached to the local session."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not authenticated", AuthErrorKind.NOT_AUTHENTICATED, context,
            severity=ErrorSeverity.INFO,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(SessionGateError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
