"""Structured Logging — JSON formatter, setup, and the default auth event sink.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (member_id, event, error_code, path, mode, operation) surfaced when present
    - JSON format in production, human-readable in development
    - log_auth_event is the only place AuthEvents become log records

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
    - Rejections and consistency failures logged at WARNING; the rest at INFO
"""

import logging
import json
from datetime import datetime, timezone

from app.core.auth_events import AuthEvent
from app.core.domain_types import AuthEventKind

_EXTRA_KEYS = ("member_id", "event", "error_code", "path", "mode", "operation")

_WARNING_EVENTS = {
    AuthEventKind.LOGIN_REJECTED,
    AuthEventKind.CONSISTENCY_FAILED,
    AuthEventKind.FORCED_LOGOUT,
}

auth_logger = logging.getLogger("app.auth")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def log_auth_event(event: AuthEvent) -> None:
    """Default EventSink: one log record per authentication event."""
    level = logging.WARNING if event.kind in _WARNING_EVENTS else logging.INFO
    auth_logger.log(
        level,
        f"auth {event.kind.value} for id={event.member_id}",
        extra={
            "event": event.kind.value,
            "member_id": event.member_id,
            **{k: v for k, v in event.detail.items() if k in _EXTRA_KEYS},
        },
    )
