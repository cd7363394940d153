"""Member Store — SQLAlchemy implementation of the MemberSessionStore protocol.

Invariants:
    - Returns immutable Member snapshots, never ORM rows
    - update_session commits on success; with expected_token the UPDATE is
      conditional on the stored token (single statement, no read-then-write)
    - Every operation runs inside store_operation: failures roll back and
      surface as DatabaseError carrying the operation name
    - Lookups always reflect the database (populate_existing), never a stale
      identity-map copy

Design Decisions:
    - UPDATE statement over ORM attribute mutation: rowcount tells whether
      the conditional update applied
"""

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import MemberId, SessionToken
from app.core.member import Member
from app.infrastructure.database import store_operation
from app.models.member import Member as MemberModel

logger = logging.getLogger(__name__)


class MemberStore:
    """Member lookup and session persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, member_id: MemberId) -> Member | None:
        async with store_operation(self.db, "find_by_id"):
            result = await self.db.execute(
                select(MemberModel)
                .where(MemberModel.id == member_id)
                .execution_options(populate_existing=True),
            )
            row = result.scalar_one_or_none()
        return row.to_snapshot() if row else None

    async def find_by_id_and_session_token(
        self, member_id: MemberId, token: SessionToken,
    ) -> Member | None:
        async with store_operation(self.db, "find_by_id_and_session_token"):
            result = await self.db.execute(
                select(MemberModel)
                .where(MemberModel.id == member_id)
                .where(MemberModel.session_token == token)
                .execution_options(populate_existing=True)
            )
            row = result.scalar_one_or_none()
        return row.to_snapshot() if row else None

    async def update_session(
        self,
        member: Member,
        session_token: SessionToken | None,
        expiry: datetime | None,
        *,
        expected_token: SessionToken | None = None,
    ) -> bool:
        stmt = (
            update(MemberModel)
            .where(MemberModel.id == member.id)
            .values(session_token=session_token, session_expiry=expiry)
        )
        if expected_token is not None:
            stmt = stmt.where(MemberModel.session_token == expected_token)

        async with store_operation(self.db, "update_session"):
            result = await self.db.execute(stmt)
            await self.db.commit()
        applied = result.rowcount > 0
        if not applied:
            logger.info(
                "Session update matched no row",
                extra={"member_id": member.id},
            )
        return applied
