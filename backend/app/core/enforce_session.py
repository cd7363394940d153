"""Session Enforcement — pure checks behind login, logout and auto-login gating.

Invariants:
    - evaluate_session_consistency is PURE: returns a verdict descriptor, no IO
    - A claim is consistent iff the (id, token) pair matched a member AND its
      expiry is strictly after now (UTC)
    - extract_session_claim raises MalformedCookieError for a missing id or token;
      that is a precondition failure, distinct from an inconsistent verdict
    - validate_password passes members without a stored hash (passwordless)

Design Decisions:
    - Verdict dicts with error_code over bools: the shell logs the reason
      without re-deriving it
    - Constant-time digest comparison for password hashes
"""

import hmac
from datetime import datetime

from app.core.credential_cookies import CredentialCookieSet
from app.core.domain_types import CookieName, MemberId, SessionToken
from app.core.errors import MalformedCookieError
from app.core.member import Member
from app.core.session_expiry import is_session_valid


def extract_session_claim(
    cookies: CredentialCookieSet,
) -> tuple[MemberId, SessionToken]:
    """The (id, sessionId) pair the client claims. Both must be present."""
    member_id = cookies.member_id
    if member_id is None:
        raise MalformedCookieError(CookieName.ID.value)
    token = cookies.session_token
    if token is None:
        raise MalformedCookieError(CookieName.SESSION_ID.value)
    return member_id, token


def evaluate_session_consistency(
    matched: Member | None, now: datetime,
) -> dict:
    """Verdict for a member looked up by the claimed (id, token) pair."""
    if matched is None:
        return {"status": "inconsistent", "error_code": "SESSION_NOT_FOUND"}
    if not is_session_valid(matched.session_expiry, now):
        return {
            "status": "inconsistent",
            "error_code": "SESSION_EXPIRED",
            "expiry": (
                matched.session_expiry.isoformat()
                if matched.session_expiry else None
            ),
        }
    return {"status": "ok"}


def validate_password(member: Member, submitted_hash: str) -> dict | None:
    """None when the password is accepted, an error descriptor otherwise."""
    if member.password_hash is None:
        return None
    if hmac.compare_digest(
        member.password_hash.encode("utf-8"), submitted_hash.encode("utf-8"),
    ):
        return None
    return {"status": "error", "error_code": "PASSWORD_MISMATCH"}
