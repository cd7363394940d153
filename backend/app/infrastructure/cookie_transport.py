"""Cookie Transport — applies queued credential cookie writes to an HTTP response.

Invariants:
    - Writes applied in queue order; a later write for the same key wins in the browser
    - max_age 0 -> delete_cookie; max_age None -> session cookie (no Max-Age)
    - The local-session cookie is issued only when a new session gained a member,
      and expired when a known session lost its member
    - The registry is synced on every flush, success or error
    - Cookie attributes (path, domain, secure, samesite) come from Settings

Design Decisions:
    - Credential cookies are NOT httponly: the client UI reads name/isAdmin/isWorker
    - Local-session cookie IS httponly: it is a server-side handle only
"""

from starlette.responses import Response

from app.config import Settings
from app.core.auth_context import AuthContext
from app.core.credential_cookies import CookieWrite
from app.infrastructure.local_sessions import local_sessions


def apply_cookie_writes(
    response: Response, writes: list[CookieWrite], settings: Settings,
) -> None:
    for write in writes:
        if write.is_delete:
            response.delete_cookie(
                key=write.name.value,
                path=settings.cookie_path,
                domain=settings.cookie_domain,
                secure=settings.cookie_secure,
                samesite=settings.cookie_samesite,
            )
        else:
            response.set_cookie(
                key=write.name.value,
                value=write.value or "",
                max_age=write.max_age,
                path=settings.cookie_path,
                domain=settings.cookie_domain,
                secure=settings.cookie_secure,
                samesite=settings.cookie_samesite,
            )


def apply_auth_context(
    response: Response, ctx: AuthContext, settings: Settings,
) -> None:
    """Flush everything an auth operation queued onto the outgoing response."""
    local = ctx.local_session
    local_sessions.sync(local)
    attached = local.authenticated_member is not None
    if local.is_new and attached:
        response.set_cookie(
            key=settings.local_session_cookie_name,
            value=local.session_id,
            path=settings.cookie_path,
            domain=settings.cookie_domain,
            secure=settings.cookie_secure,
            samesite=settings.cookie_samesite,
            httponly=True,
        )
    elif not local.is_new and not attached:
        response.delete_cookie(
            key=settings.local_session_cookie_name,
            path=settings.cookie_path,
            domain=settings.cookie_domain,
            secure=settings.cookie_secure,
            samesite=settings.cookie_samesite,
            httponly=True,
        )
    apply_cookie_writes(response, ctx.pending_cookies, settings)
    ctx.pending_cookies.clear()
