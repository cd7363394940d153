"""Member Snapshot — immutable view of a member record for one operation.

Invariants:
    - Frozen: the core never mutates a member; session changes go through the store
    - password_hash None means passwordless (pre-verified) member
    - session_token and session_expiry are both set (persistent) or both None (one-time)

Design Decisions:
    - Dataclass snapshot over ORM row: core stays free of SQLAlchemy
"""

from dataclasses import dataclass, replace
from datetime import datetime

from app.core.domain_types import MemberId, SessionToken


@dataclass(frozen=True)
class Member:
    id: MemberId
    name: str
    phone_number: str
    password_hash: str | None = None
    is_worker: bool = False
    is_admin: bool = False
    session_token: SessionToken | None = None
    session_expiry: datetime | None = None

    def with_session(
        self, token: SessionToken | None, expiry: datetime | None,
    ) -> "Member":
        """Copy carrying the given persisted session fields."""
        return replace(self, session_token=token, session_expiry=expiry)
