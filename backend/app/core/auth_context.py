"""Auth Context — per-request authentication state handed from the shell to the services.

Invariants:
    - LocalSession holds at most one authenticated member (typed field, no attribute bag)
    - AuthContext.cookies is the inbound CredentialCookieSet, read once and never mutated
    - pending_cookies is append-only within a request; the transport applies it in order
    - force_logout() clears all seven cookies AND detaches the member, always together

Design Decisions:
    - Cookie writes are queued, not sent: the route (or the error handler) owns the
      response object, so writes survive an operation that ends in an exception
"""

from dataclasses import dataclass, field

from app.core.credential_cookies import (
    CookieWrite, CredentialCookieSet, build_cookie_clears,
)
from app.core.domain_types import LocalSessionId
from app.core.member import Member


@dataclass
class LocalSession:
    """Ephemeral server-side state for one client."""
    session_id: LocalSessionId
    authenticated_member: Member | None = None
    is_new: bool = False

    def attach(self, member: Member) -> None:
        self.authenticated_member = member

    def detach(self) -> None:
        self.authenticated_member = None


@dataclass
class AuthContext:
    cookies: CredentialCookieSet
    local_session: LocalSession
    pending_cookies: list[CookieWrite] = field(default_factory=list)

    def queue_cookies(self, writes: list[CookieWrite]) -> None:
        self.pending_cookies.extend(writes)

    def force_logout(self) -> None:
        self.queue_cookies(build_cookie_clears())
        self.local_session.detach()
