"""Credential Cookies — the seven client-side credential fields as one typed value.

Invariants:
    - Collected ONCE at the request boundary via from_cookies(); no scattered lookups
    - is_complete() is true iff all seven fields are present and non-empty
    - A partial set is never trusted: callers take the credential path instead
    - Writes and clears always cover all seven fields, in CookieName order
    - max_age 0 deletes a cookie; max_age None makes it session-scoped

Design Decisions:
    - Optional str per field over a raw mapping: absence is explicit per field
    - Boolean cookie parsing is case-insensitive; anything but "true" is False
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields

from app.core.domain_types import (
    A_YEAR_SECONDS, CookieName, LoginMode, MemberId, SessionToken,
)
from app.core.member import Member


@dataclass(frozen=True)
class CookieWrite:
    """One outbound Set-Cookie instruction."""
    name: CookieName
    value: str | None
    max_age: int | None

    @property
    def is_delete(self) -> bool:
        return self.max_age == 0


@dataclass(frozen=True)
class CredentialCookieSet:
    id: str | None = None
    name: str | None = None
    phone_number: str | None = None
    is_worker: str | None = None
    session_id: str | None = None
    is_admin: str | None = None
    is_auto_login: str | None = None

    @classmethod
    def from_cookies(cls, cookies: Mapping[str, str] | None) -> "CredentialCookieSet":
        """Read the seven credential fields from an inbound cookie mapping."""
        if not cookies:
            return cls()
        values = {
            attr: _present(cookies.get(key.value))
            for attr, key in _FIELD_KEYS.items()
        }
        return cls(**values)

    def is_complete(self) -> bool:
        return all(getattr(self, f.name) is not None for f in fields(self))

    @property
    def is_persistent(self) -> bool:
        return parse_cookie_bool(self.is_auto_login)

    @property
    def member_id(self) -> MemberId | None:
        return MemberId(self.id) if self.id is not None else None

    @property
    def session_token(self) -> SessionToken | None:
        return SessionToken(self.session_id) if self.session_id is not None else None


_FIELD_KEYS: dict[str, CookieName] = {
    "id": CookieName.ID,
    "name": CookieName.NAME,
    "phone_number": CookieName.PHONE_NUMBER,
    "is_worker": CookieName.IS_WORKER,
    "session_id": CookieName.SESSION_ID,
    "is_admin": CookieName.IS_ADMIN,
    "is_auto_login": CookieName.IS_AUTO_LOGIN,
}


def _present(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    return value


def parse_cookie_bool(value: str | None) -> bool:
    return value is not None and value.strip().lower() == "true"


def cookie_max_age(mode: LoginMode) -> int | None:
    """One year for persistent logins; session-scoped for one-time logins."""
    return A_YEAR_SECONDS if mode is LoginMode.PERSISTENT else None


def build_login_cookies(
    member: Member, session_id: str, mode: LoginMode,
) -> list[CookieWrite]:
    """All seven credential cookies for a fresh login."""
    max_age = cookie_max_age(mode)
    values = {
        CookieName.ID: member.id,
        CookieName.NAME: member.name,
        CookieName.PHONE_NUMBER: member.phone_number,
        CookieName.IS_WORKER: _flag(member.is_worker),
        CookieName.SESSION_ID: session_id,
        CookieName.IS_ADMIN: _flag(member.is_admin),
        CookieName.IS_AUTO_LOGIN: "true" if mode is LoginMode.PERSISTENT else "false",
    }
    return [CookieWrite(name, values[name], max_age) for name in CookieName]


def build_cookie_clears() -> list[CookieWrite]:
    """Delete instructions for all seven credential cookies."""
    return [CookieWrite(name, None, 0) for name in CookieName]


def _flag(value: bool) -> str:
    return "1" if value else "0"
