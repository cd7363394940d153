"""Request Dependencies — build the per-request AuthContext and reconciler.

Invariants:
    - Credential cookies read exactly once per request, here
    - The AuthContext is stashed on request.state so the error handler can flush
      cookie writes queued before a failure
    - One MemberStore (one DB session) per request

Design Decisions:
    - FastAPI Depends over module-level singletons for the reconciler: tests
      override get_db and everything downstream follows
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.auth_context import AuthContext
from app.core.credential_cookies import CredentialCookieSet
from app.infrastructure.database import get_db
from app.infrastructure.local_sessions import local_sessions
from app.infrastructure.observability import log_auth_event
from app.infrastructure.password_hashing import Md5PasswordHasher
from app.services.member_store import MemberStore
from app.services.session_reconciler import SessionReconciler


def get_auth_context(
    request: Request, settings: Settings = Depends(get_settings),
) -> AuthContext:
    ctx = AuthContext(
        cookies=CredentialCookieSet.from_cookies(request.cookies),
        local_session=local_sessions.resolve(
            request.cookies.get(settings.local_session_cookie_name),
        ),
    )
    request.state.auth_context = ctx
    return ctx


async def get_reconciler(
    db: AsyncSession = Depends(get_db),
) -> SessionReconciler:
    return SessionReconciler(
        MemberStore(db), Md5PasswordHasher(), emit=log_auth_event,
    )
