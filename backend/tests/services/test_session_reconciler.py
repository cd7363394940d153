"""Session Reconciler — login, logout and auto-login gate against an in-memory store.

Tests cover:
    - Credential path: success per mode, NotFound, InvalidCredentials, passwordless,
      CredentialsRequired, empty sessionId cookie treated as absent
    - Cookie path: persistent consistent, one-time (no check), forced logout on
      mismatch or expiry, NotFound for unknown cookie id
    - logout: no cookies, one-time cookies, persistent cookies, rotated token,
      cleanup runs even when the store raises
    - check_auto_login: missing flag, consistent, inconsistent (no cleanup), malformed
    - Events emitted for rejections and forced logouts
"""

import hashlib
from datetime import datetime, timedelta, timezone

import pytest

from app.core.auth_context import AuthContext, LocalSession
from app.core.credential_cookies import CredentialCookieSet
from app.core.domain_types import (
    A_YEAR_SECONDS, AuthErrorKind, AuthEventKind, CookieName, LoginMode,
)
from app.core.errors import (
    CredentialsRequiredError,
    InvalidCredentialsError,
    MalformedCookieError,
    MemberNotFoundError,
    SessionInvalidError,
)
from app.core.member import Member
from app.infrastructure.password_hashing import Md5PasswordHasher
from app.services.session_reconciler import SessionReconciler, SubmittedCredentials

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def _md5(raw: str) -> str:
    return hashlib.md5(raw.encode()).hexdigest()


def _ctx(cookies: dict | None = None, session_id: str = "LOCAL1") -> AuthContext:
    return AuthContext(
        cookies=CredentialCookieSet.from_cookies(cookies),
        local_session=LocalSession(session_id=session_id),
    )


def _cookie_dict(auto_login: str = "true", session_id: str = "S1", member_id: str = "u1") -> dict:
    return {
        "id": member_id,
        "name": "Kim",
        "phoneNumber": "010",
        "isWorker": "0",
        "sessionId": session_id,
        "isAdmin": "0",
        "isAutoLogin": auto_login,
    }


@pytest.fixture
def events():
    return []


@pytest.fixture
def reconciler(fake_store, events):
    return SessionReconciler(
        fake_store, Md5PasswordHasher(), clock=lambda: NOW, emit=events.append,
    )


@pytest.fixture
def member(fake_store):
    return fake_store.add(Member(
        id="u1", name="Kim", phone_number="010", password_hash=_md5("pw"),
    ))


def _written(ctx: AuthContext) -> dict:
    return {w.name: w for w in ctx.pending_cookies}


def _assert_forced_logout(ctx: AuthContext):
    written = _written(ctx)
    assert set(written) == set(CookieName)
    assert all(w.is_delete for w in written.values())
    assert ctx.local_session.authenticated_member is None


# ─── login: credential path ─────────────────────────────────────

async def test_persistent_credential_login(reconciler, fake_store, member):
    """Scenario A: correct password + isAutoLogin -> persistent session."""
    ctx = _ctx()
    result = await reconciler.login(
        ctx, SubmittedCredentials("u1", "pw", persistent=True),
    )

    assert result.mode is LoginMode.PERSISTENT
    stored = fake_store.members["u1"]
    assert stored.session_token == "LOCAL1"
    assert stored.session_expiry == datetime(2027, 10, 17, 12, 0, tzinfo=timezone.utc)
    written = _written(ctx)
    assert written[CookieName.SESSION_ID].value == "LOCAL1"
    assert written[CookieName.ID].max_age == A_YEAR_SECONDS
    assert ctx.local_session.authenticated_member.id == "u1"


async def test_one_time_credential_login_clears_persisted_session(
    reconciler, fake_store,
):
    fake_store.add(Member(
        id="u1", name="Kim", phone_number="010", password_hash=_md5("pw"),
        session_token="OLD", session_expiry=NOW + timedelta(days=5),
    ))
    ctx = _ctx()
    result = await reconciler.login(ctx, SubmittedCredentials("u1", "pw"))

    assert result.mode is LoginMode.ONE_TIME
    stored = fake_store.members["u1"]
    assert stored.session_token is None
    assert stored.session_expiry is None
    assert _written(ctx)[CookieName.IS_AUTO_LOGIN].value == "false"
    assert _written(ctx)[CookieName.ID].max_age is None


async def test_wrong_password_fails_without_writes(reconciler, fake_store, member, events):
    """Scenario B: wrong password -> InvalidCredentials, nothing written."""
    ctx = _ctx()
    with pytest.raises(InvalidCredentialsError) as exc_info:
        await reconciler.login(ctx, SubmittedCredentials("u1", "bad"))

    assert exc_info.value.kind is AuthErrorKind.INVALID_CREDENTIALS
    assert ctx.pending_cookies == []
    assert fake_store.updates == []
    assert ctx.local_session.authenticated_member is None
    assert events[-1].kind is AuthEventKind.LOGIN_REJECTED


async def test_unknown_member_fails_with_not_found(reconciler):
    ctx = _ctx()
    with pytest.raises(MemberNotFoundError):
        await reconciler.login(ctx, SubmittedCredentials("ghost", "pw"))
    assert ctx.pending_cookies == []


async def test_passwordless_member_logs_in_with_any_password(reconciler, fake_store):
    fake_store.add(Member(id="u2", name="Lee", phone_number="011"))
    result = await reconciler.login(_ctx(), SubmittedCredentials("u2", "anything"))
    assert result.member.id == "u2"


async def test_incomplete_cookies_without_credentials(reconciler, member):
    partial = {k: v for k, v in _cookie_dict().items() if k != "name"}
    with pytest.raises(CredentialsRequiredError):
        await reconciler.login(_ctx(partial))


async def test_partial_cookies_are_never_trusted(reconciler, fake_store, member):
    """A partial cookie set routes to the password check even with a valid token."""
    fake_store.members["u1"] = member.with_session("S1", NOW + timedelta(days=1))
    partial = {k: v for k, v in _cookie_dict().items() if k != "isAdmin"}
    with pytest.raises(InvalidCredentialsError):
        await reconciler.login(_ctx(partial), SubmittedCredentials("u1", "bad"))


async def test_empty_session_id_cookie_takes_credential_path(
    reconciler, fake_store, member, events,
):
    """An empty sessionId counts as absent: no forced logout, password checked."""
    ctx = _ctx(_cookie_dict(session_id=""))

    result = await reconciler.login(ctx, SubmittedCredentials("u1", "pw"))

    assert result.mode is LoginMode.ONE_TIME
    assert not any(e.kind is AuthEventKind.CONSISTENCY_FAILED for e in events)
    assert not any(e.kind is AuthEventKind.FORCED_LOGOUT for e in events)
    with pytest.raises(InvalidCredentialsError):
        await reconciler.login(
            _ctx(_cookie_dict(session_id="")), SubmittedCredentials("u1", "bad"),
        )


# ─── login: cookie path ─────────────────────────────────────────

async def test_persistent_cookie_login_reissues_session(reconciler, fake_store, member):
    fake_store.members["u1"] = member.with_session("S1", NOW + timedelta(days=10))
    ctx = _ctx(_cookie_dict(), session_id="LOCAL2")

    result = await reconciler.login(ctx, SubmittedCredentials("u1", "bad"))

    assert result.mode is LoginMode.PERSISTENT
    assert fake_store.members["u1"].session_token == "LOCAL2"
    assert _written(ctx)[CookieName.SESSION_ID].value == "LOCAL2"


async def test_expired_persistent_cookie_forces_logout(reconciler, fake_store, member, events):
    """Scenario C: token matches but expiry was yesterday."""
    fake_store.members["u1"] = member.with_session("S1", NOW - timedelta(days=1))
    ctx = _ctx(_cookie_dict())
    ctx.local_session.attach(member)

    with pytest.raises(SessionInvalidError) as exc_info:
        await reconciler.login(ctx)

    assert exc_info.value.kind is AuthErrorKind.SESSION_INVALID
    _assert_forced_logout(ctx)
    assert fake_store.updates == []
    kinds = [e.kind for e in events]
    assert AuthEventKind.CONSISTENCY_FAILED in kinds
    assert AuthEventKind.FORCED_LOGOUT in kinds


async def test_mismatched_token_forces_logout(reconciler, fake_store, member):
    fake_store.members["u1"] = member.with_session("S2", NOW + timedelta(days=1))
    ctx = _ctx(_cookie_dict(session_id="S1"))

    with pytest.raises(SessionInvalidError):
        await reconciler.login(ctx)
    _assert_forced_logout(ctx)


async def test_one_time_cookie_login_skips_consistency_check(reconciler, fake_store, member):
    """Non-persistent complete cookies re-authenticate by id alone."""
    ctx = _ctx(_cookie_dict(auto_login="false", session_id="WHATEVER"))
    result = await reconciler.login(ctx)
    assert result.mode is LoginMode.ONE_TIME
    assert ctx.local_session.authenticated_member.id == "u1"


async def test_cookie_login_unknown_member(reconciler):
    with pytest.raises(MemberNotFoundError):
        await reconciler.login(_ctx(_cookie_dict(member_id="ghost")))


# ─── login: store failure ───────────────────────────────────────

async def test_store_failure_leaves_client_unauthenticated(reconciler, fake_store, member):
    fake_store.fail_updates_with = RuntimeError("db down")
    ctx = _ctx()
    with pytest.raises(RuntimeError, match="db down"):
        await reconciler.login(ctx, SubmittedCredentials("u1", "pw", persistent=True))
    assert ctx.pending_cookies == []
    assert ctx.local_session.authenticated_member is None


# ─── logout ─────────────────────────────────────────────────────

async def test_logout_without_cookies_only_clears_client(reconciler, fake_store):
    """P5: no cookies -> no store call, still full clear + detach."""
    ctx = _ctx()
    ctx.local_session.attach(Member(id="u1", name="Kim", phone_number="010"))

    await reconciler.logout(ctx)

    assert fake_store.updates == []
    _assert_forced_logout(ctx)


async def test_logout_one_time_cookies_skips_store(reconciler, fake_store, member):
    ctx = _ctx(_cookie_dict(auto_login="false"))
    await reconciler.logout(ctx)
    assert fake_store.updates == []
    _assert_forced_logout(ctx)


async def test_logout_persistent_clears_persisted_session(reconciler, fake_store, member):
    fake_store.members["u1"] = member.with_session("S1", NOW + timedelta(days=1))
    ctx = _ctx(_cookie_dict())

    await reconciler.logout(ctx)

    stored = fake_store.members["u1"]
    assert stored.session_token is None
    assert stored.session_expiry is None
    assert fake_store.updates == [("u1", None, None, "S1")]
    _assert_forced_logout(ctx)


async def test_logout_with_rotated_token_still_clears_client(reconciler, fake_store, member):
    """Scenario E: (id, sessionId) no longer matches -> NotFound, client still cleared."""
    fake_store.members["u1"] = member.with_session("S9", NOW + timedelta(days=1))
    ctx = _ctx(_cookie_dict(session_id="S1"))
    ctx.local_session.attach(member)

    with pytest.raises(MemberNotFoundError):
        await reconciler.logout(ctx)

    assert fake_store.members["u1"].session_token == "S9"
    _assert_forced_logout(ctx)


async def test_logout_clears_client_when_store_raises(reconciler, fake_store, member):
    fake_store.members["u1"] = member.with_session("S1", NOW + timedelta(days=1))
    fake_store.fail_updates_with = RuntimeError("db down")
    ctx = _ctx(_cookie_dict())

    with pytest.raises(RuntimeError):
        await reconciler.logout(ctx)
    _assert_forced_logout(ctx)


# ─── check_auto_login ───────────────────────────────────────────

async def test_check_auto_login_without_flag_is_noop(reconciler, fake_store):
    """Scenario D: isAutoLogin missing -> treated as false, no lookup."""
    cookies = CredentialCookieSet.from_cookies({"id": "u1"})
    assert await reconciler.check_auto_login(cookies) is None


async def test_check_auto_login_accepts_consistent_session(reconciler, fake_store, member):
    fake_store.members["u1"] = member.with_session("S1", NOW + timedelta(hours=1))
    await reconciler.check_auto_login(CredentialCookieSet.from_cookies(_cookie_dict()))


async def test_check_auto_login_rejects_without_cleanup(reconciler, fake_store, member):
    fake_store.members["u1"] = member.with_session("S1", NOW - timedelta(hours=1))
    cookies = CredentialCookieSet.from_cookies(_cookie_dict())
    with pytest.raises(SessionInvalidError):
        await reconciler.check_auto_login(cookies)
    assert fake_store.updates == []


async def test_check_auto_login_malformed_claim(reconciler):
    cookies = CredentialCookieSet.from_cookies({"isAutoLogin": "true", "id": "u1"})
    with pytest.raises(MalformedCookieError):
        await reconciler.check_auto_login(cookies)


# ─── is_session_consistent ──────────────────────────────────────

@pytest.mark.parametrize("stored_token,expiry_delta,expected", [
    ("S1", timedelta(days=1), True),
    ("S1", timedelta(days=-1), False),
    ("S2", timedelta(days=1), False),
    ("S1", timedelta(0), False),
])
async def test_is_session_consistent(
    reconciler, fake_store, member, stored_token, expiry_delta, expected,
):
    """P2: consistent iff pair matches AND expiry > now."""
    fake_store.members["u1"] = member.with_session(stored_token, NOW + expiry_delta)
    cookies = CredentialCookieSet.from_cookies(_cookie_dict(session_id="S1"))
    assert await reconciler.is_session_consistent(cookies) is expected
