"""Session Reconciler — decides, per request, whether a client is authenticated.

Reconciles three sources of truth: the in-memory local session, the seven
credential cookies, and the member's persisted session record.

Invariants:
    - Incomplete cookies -> credential path (id + password); complete cookies -> cookie path
    - Cookie path with isAutoLogin=true must pass is_session_consistent, else
      forced logout (cookies cleared + member detached) THEN SessionInvalidError
    - logout clears cookies and detaches the member unconditionally, even when
      the store step raises
    - check_auto_login is read-only: it raises but never clears state
    - Store failures propagate unchanged; nothing here retries

Design Decisions:
    - Errors raised as typed AuthenticationError subclasses carrying an
      AuthErrorKind: callers branch on kind, the global handler renders them
    - Observability through an injected EventSink instead of log calls, so
      tests can assert on what happened without capturing logs
    - Cookie presence bypasses the password check entirely: a complete cookie
      set re-authenticates by id, persistent or not
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from app.core.auth_context import AuthContext
from app.core.auth_events import AuthEvent, EventSink
from app.core.credential_cookies import CredentialCookieSet
from app.core.domain_types import AuthEventKind, LoginMode, MemberId
from app.core.enforce_session import (
    evaluate_session_consistency, extract_session_claim, validate_password,
)
from app.core.errors import (
    CredentialsRequiredError, InvalidCredentialsError, MemberNotFoundError,
    SessionInvalidError,
)
from app.core.member import Member
from app.core.repository_protocols import MemberSessionStore, PasswordHasher
from app.core.session_expiry import utc_now
from app.services.login_session_writer import LoginSessionWriter


@dataclass(frozen=True)
class SubmittedCredentials:
    member_id: MemberId
    password: str
    persistent: bool = False


@dataclass(frozen=True)
class LoginResult:
    member: Member
    mode: LoginMode


def _discard(event: AuthEvent) -> None:
    return None


class SessionReconciler:
    """Login / logout / auto-login gate over a MemberSessionStore."""

    def __init__(
        self,
        store: MemberSessionStore,
        hasher: PasswordHasher,
        writer: LoginSessionWriter | None = None,
        clock: Callable[[], datetime] = utc_now,
        emit: EventSink = _discard,
    ):
        self.store = store
        self.hasher = hasher
        self.clock = clock
        self.writer = writer or LoginSessionWriter(store, clock)
        self.emit = emit

    # ─── login ──────────────────────────────────────────────────

    async def login(
        self,
        ctx: AuthContext,
        credentials: SubmittedCredentials | None = None,
    ) -> LoginResult:
        if ctx.cookies.is_complete():
            member, mode = await self._authenticate_by_cookies(ctx)
        else:
            member, mode = await self._authenticate_by_credentials(credentials)

        plan = await self.writer.write(ctx, member, mode)
        self.emit(AuthEvent(
            AuthEventKind.LOGIN_SUCCEEDED, member.id, {"mode": mode.value},
        ))
        return LoginResult(member=plan.member, mode=mode)

    async def _authenticate_by_credentials(
        self, credentials: SubmittedCredentials | None,
    ) -> tuple[Member, LoginMode]:
        if credentials is None:
            raise CredentialsRequiredError()

        member = await self.store.find_by_id(credentials.member_id)
        if member is None:
            self._reject(credentials.member_id, "MEMBER_NOT_FOUND")
            raise MemberNotFoundError(credentials.member_id)

        failure = validate_password(member, self.hasher.hash(credentials.password))
        if failure:
            self._reject(member.id, failure["error_code"])
            raise InvalidCredentialsError(member.id)

        return member, LoginMode.from_flag(credentials.persistent)

    async def _authenticate_by_cookies(
        self, ctx: AuthContext,
    ) -> tuple[Member, LoginMode]:
        cookie_id = ctx.cookies.member_id
        member = await self.store.find_by_id(cookie_id)
        if member is None:
            self._reject(cookie_id, "MEMBER_NOT_FOUND")
            raise MemberNotFoundError(cookie_id)

        persistent = ctx.cookies.is_persistent
        if persistent and not await self.is_session_consistent(ctx.cookies):
            ctx.force_logout()
            self.emit(AuthEvent(AuthEventKind.FORCED_LOGOUT, cookie_id))
            raise SessionInvalidError("Member session does not exist")

        return member, LoginMode.from_flag(persistent)

    # ─── logout ─────────────────────────────────────────────────

    async def logout(self, ctx: AuthContext) -> None:
        cookies = ctx.cookies
        try:
            if cookies.is_complete() and cookies.is_persistent:
                await self._clear_persisted_session(cookies)
        finally:
            ctx.force_logout()
            self.emit(AuthEvent(AuthEventKind.LOGOUT_COMPLETED, cookies.id))

    async def _clear_persisted_session(self, cookies: CredentialCookieSet) -> None:
        member_id, token = extract_session_claim(cookies)
        member = await self.store.find_by_id_and_session_token(member_id, token)
        if member is None:
            raise MemberNotFoundError(member_id)

        cleared = await self.store.update_session(
            member, None, None, expected_token=token,
        )
        if not cleared:
            # Token rotated between lookup and update
            raise MemberNotFoundError(member_id)
        self.emit(AuthEvent(AuthEventKind.SESSION_CLEARED, member_id))

    # ─── auto-login gate ────────────────────────────────────────

    async def check_auto_login(self, cookies: CredentialCookieSet) -> None:
        if not cookies.is_persistent:
            return
        if not await self.is_session_consistent(cookies):
            raise SessionInvalidError("Cookie session is not valid")

    async def is_session_consistent(self, cookies: CredentialCookieSet) -> bool:
        member_id, token = extract_session_claim(cookies)
        matched = await self.store.find_by_id_and_session_token(member_id, token)
        verdict = evaluate_session_consistency(matched, self.clock())
        if verdict["status"] != "ok":
            self.emit(AuthEvent(
                AuthEventKind.CONSISTENCY_FAILED, member_id,
                {"error_code": verdict["error_code"]},
            ))
            return False
        return True

    def _reject(self, member_id: str | None, reason: str) -> None:
        self.emit(AuthEvent(
            AuthEventKind.LOGIN_REJECTED, member_id, {"error_code": reason},
        ))
