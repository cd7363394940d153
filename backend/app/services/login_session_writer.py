"""Login Session Writer — establishes the persisted record, cookies and local session.

Invariants:
    - Store update runs FIRST; cookies are queued and the member attached only after it succeeds
    - An update that matches no row (member deleted since lookup) raises
      MemberNotFoundError with nothing queued and nothing attached
    - A store failure propagates unchanged and leaves the client unauthenticated
    - PERSISTENT writes token + expiry; ONE_TIME clears both

Design Decisions:
    - Store-first ordering: a half-applied login must fail closed (client not
      trusted), never open (cookies claiming a session the DB never recorded)
"""

import logging
from collections.abc import Callable
from datetime import datetime

from app.core.auth_context import AuthContext
from app.core.domain_types import LoginMode
from app.core.errors import MemberNotFoundError
from app.core.login_plan import LoginPlan, plan_login
from app.core.member import Member
from app.core.repository_protocols import MemberSessionStore
from app.core.session_expiry import utc_now

logger = logging.getLogger(__name__)


class LoginSessionWriter:
    """Applies a LoginPlan to the store, the outbound cookies and the local session."""

    def __init__(
        self,
        store: MemberSessionStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.clock = clock

    async def write(
        self, ctx: AuthContext, member: Member, mode: LoginMode,
    ) -> LoginPlan:
        plan = plan_login(member, mode, ctx.local_session.session_id, self.clock())
        applied = await self.store.update_session(
            member, plan.session_token, plan.session_expiry,
        )
        if not applied:
            logger.warning(
                "Login session not written: member row gone",
                extra={"member_id": member.id, "mode": mode.value},
            )
            raise MemberNotFoundError(member.id)

        ctx.queue_cookies(plan.cookies)
        ctx.local_session.attach(plan.member)
        logger.debug(
            f"Login session written ({mode.value})",
            extra={"member_id": member.id},
        )
        return plan
