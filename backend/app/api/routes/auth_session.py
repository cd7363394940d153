"""Auth Session Routes — login, logout, auto-login check, and current member.

Invariants:
    - Routes hold no authentication decisions; SessionReconciler owns them
    - Every response flushes the AuthContext's queued cookie writes
    - Failed operations flush too (via the error handler), so a forced logout
      clears cookies even though the request fails

Design Decisions:
    - Login body is optional: a client holding a complete cookie set re-logs in
      with an empty POST
    - /check is read-only and returns 204; the client decides whether to log out
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, Response

from app.api.dependencies import get_auth_context, get_reconciler
from app.config import Settings, get_settings
from app.core.auth_context import AuthContext
from app.core.errors import NotAuthenticatedError
from app.infrastructure.cookie_transport import apply_auth_context
from app.schemas.auth import LoginRequest, LoginResponse, MemberProfile
from app.services.session_reconciler import SessionReconciler

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login")
async def login(
    body: LoginRequest | None = None,
    ctx: AuthContext = Depends(get_auth_context),
    reconciler: SessionReconciler = Depends(get_reconciler),
    settings: Settings = Depends(get_settings),
):
    """Authenticate by credential cookies or, failing those, by id + password."""
    result = await reconciler.login(
        ctx, body.to_credentials() if body else None,
    )
    payload = LoginResponse(
        member=MemberProfile.from_member(result.member),
        login_mode=result.mode,
    )
    response = JSONResponse(content=payload.model_dump(mode="json", by_alias=True))
    apply_auth_context(response, ctx, settings)
    return response


@router.post("/logout")
async def logout(
    ctx: AuthContext = Depends(get_auth_context),
    reconciler: SessionReconciler = Depends(get_reconciler),
    settings: Settings = Depends(get_settings),
):
    """Clear the persisted session (persistent logins), cookies, and local session."""
    await reconciler.logout(ctx)
    response = JSONResponse(content={"status": "logged_out"})
    apply_auth_context(response, ctx, settings)
    return response


@router.get("/check", status_code=status.HTTP_204_NO_CONTENT)
async def check_auto_login(
    ctx: AuthContext = Depends(get_auth_context),
    reconciler: SessionReconciler = Depends(get_reconciler),
    settings: Settings = Depends(get_settings),
):
    """Validate a persistent cookie claim against the persisted session."""
    await reconciler.check_auto_login(ctx.cookies)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    apply_auth_context(response, ctx, settings)
    return response


@router.get("/me")
async def current_member(ctx: AuthContext = Depends(get_auth_context)):
    """Member attached to this client's local session."""
    member = ctx.local_session.authenticated_member
    if member is None:
        raise NotAuthenticatedError()
    return MemberProfile.from_member(member).model_dump(mode="json", by_alias=True)
