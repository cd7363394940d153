"""Health Routes — liveness and readiness of the session gate.

Invariants:
    - GET /health/ answers 200 while the process runs, without touching the DB
    - GET /health/ready answers 503 when the members database does not answer a ping
    - Readiness reports how many local sessions currently hold a member
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import app.infrastructure.database as db_module
from app.infrastructure.local_sessions import local_sessions

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": "session-gate-api"}


@router.get("/ready")
async def readiness():
    manager = db_module.db_manager
    if manager is None or not await manager.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "members_database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "local_sessions": len(local_sessions),
    }
