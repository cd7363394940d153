"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Member lookup, session persistence and password hashing accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in MemberSessionStore: implementations do IO, but the core functions that
      judge its results are never async; the services orchestrate the calls
    - update_session takes expected_token: a conditional update is the only way to
      keep a concurrent login and logout for one member from clobbering each other
"""

from datetime import datetime
from typing import Protocol

from app.core.domain_types import MemberId, SessionToken
from app.core.member import Member


class MemberSessionStore(Protocol):
    """Contract for member lookup and persisted session metadata."""
    async def find_by_id(self, member_id: MemberId) -> Member | None: ...
    async def find_by_id_and_session_token(
        self, member_id: MemberId, token: SessionToken,
    ) -> Member | None: ...
    async def update_session(
        self,
        member: Member,
        session_token: SessionToken | None,
        expiry: datetime | None,
        *,
        expected_token: SessionToken | None = None,
    ) -> bool:
        """Write (or clear, with Nones) the session. With expected_token, applies
        only while the stored token still equals it. Returns whether a row changed."""
        ...


class PasswordHasher(Protocol):
    """Same transform used to produce Member.password_hash."""
    def hash(self, raw_password: str) -> str: ...
