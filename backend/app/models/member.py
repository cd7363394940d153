"""Member ORM — persists member identity and the durable login session.

Invariants:
    - id is a caller-chosen string primary key (login id)
    - password_hash NULL means passwordless (pre-verified) member
    - session_token and session_expiry are written together: both set or both NULL
    - session_expiry is stored in UTC

Design Decisions:
    - Session fields on the member row, not a sessions table: at most one durable
      session per member, and a new persistent login replaces the old one
    - session_token indexed: logout and auto-login look members up by (id, token)
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import MemberId, SessionToken
from app.core.member import Member as MemberSnapshot
from app.db.base import Base


class Member(Base):
    """Member account row."""
    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    password_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    is_worker: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    session_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True,
    )
    session_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    def to_snapshot(self) -> MemberSnapshot:
        return MemberSnapshot(
            id=MemberId(self.id),
            name=self.name,
            phone_number=self.phone_number,
            password_hash=self.password_hash,
            is_worker=self.is_worker,
            is_admin=self.is_admin,
            session_token=(
                SessionToken(self.session_token) if self.session_token else None
            ),
            session_expiry=self.session_expiry,
        )
