"""Login Plan — everything a successful login must write, computed without IO.

Invariants:
    - PERSISTENT: persisted token = local session id, expiry = now + 1 year (UTC)
    - ONE_TIME: persisted token and expiry are both None
    - Cookie writes always carry all seven fields with the mode's lifetime
    - plan_login is PURE; LoginSessionWriter applies it store-first
"""

from dataclasses import dataclass
from datetime import datetime

from app.core.credential_cookies import CookieWrite, build_login_cookies
from app.core.domain_types import LocalSessionId, LoginMode, SessionToken
from app.core.member import Member
from app.core.session_expiry import compute_session_expiry


@dataclass(frozen=True)
class LoginPlan:
    member: Member
    mode: LoginMode
    session_token: SessionToken | None
    session_expiry: datetime | None
    cookies: list[CookieWrite]


def plan_login(
    member: Member, mode: LoginMode, session_id: LocalSessionId, now: datetime,
) -> LoginPlan:
    if mode is LoginMode.PERSISTENT:
        token = SessionToken(session_id)
        expiry = compute_session_expiry(now)
    else:
        token, expiry = None, None
    return LoginPlan(
        member=member.with_session(token, expiry),
        mode=mode,
        session_token=token,
        session_expiry=expiry,
        cookies=build_login_cookies(member, session_id, mode),
    )
