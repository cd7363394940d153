"""Error Handlers — global exception handlers for the SessionGate API.

Invariants:
    - SessionGateError → structured JSON with error code, message, severity
    - Cookie writes queued before a SessionGateError are still sent (forced logout)
    - RequestValidationError → field-level error details
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (SessionGateError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py: keeps the entry point's import fan-out small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.config import get_settings
from app.core.errors import SessionGateError, ErrorSeverity
from app.infrastructure.cookie_transport import apply_auth_context

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_session_gate_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_session_gate_error_handler(app: FastAPI) -> None:
    """Register SessionGate domain/infrastructure error handler."""

    @app.exception_handler(SessionGateError)
    async def session_gate_error_handler(request: Request, exc: SessionGateError):
        """Handle all SessionGate domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"SessionGateError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        response = JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )
        ctx = getattr(request.state, "auth_context", None)
        if ctx is not None:
            apply_auth_context(response, ctx, get_settings())
        return response


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
