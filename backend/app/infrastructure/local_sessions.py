"""Local Session Registry — in-memory per-client server-side sessions.

Invariants:
    - One LocalSession per local-session cookie value
    - Only sessions holding an authenticated member are stored; anonymous
      requests never grow the registry
    - Unknown or missing ids resolve to a fresh, unstored session (is_new=True)
    - sync() after each auth response stores attached sessions and drops
      detached ones (logout, forced logout)

Design Decisions:
    - Module-level singleton dict: single-process uvicorn; sessions are lost on
      restart, which persistent logins survive through the member record
    - Lazy storage over a TTL sweep: the entry count is bounded by logged-in
      clients, with no background task
"""

import logging
from uuid import uuid4

from app.core.auth_context import LocalSession
from app.core.domain_types import LocalSessionId

logger = logging.getLogger(__name__)


class LocalSessionRegistry:
    def __init__(self):
        self._sessions: dict[LocalSessionId, LocalSession] = {}

    def resolve(self, session_id: str | None) -> LocalSession:
        if session_id:
            existing = self._sessions.get(LocalSessionId(session_id))
            if existing is not None:
                existing.is_new = False
                return existing
        return LocalSession(session_id=LocalSessionId(uuid4().hex), is_new=True)

    def sync(self, session: LocalSession) -> None:
        if session.authenticated_member is not None:
            self._sessions[session.session_id] = session
        elif self._sessions.pop(session.session_id, None) is not None:
            logger.debug("Local session dropped")

    def get(self, session_id: str) -> LocalSession | None:
        return self._sessions.get(LocalSessionId(session_id))

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


local_sessions = LocalSessionRegistry()
