"""Session Expiry Policy — decides whether a persisted session is inside its window.

Invariants:
    - is_session_valid is PURE: valid iff expiry is not None and expiry > now
    - All comparisons happen in UTC; naive datetimes are read as UTC
    - Persistent sessions last one calendar year from login

Design Decisions:
    - Naive-as-UTC over rejecting naive values: SQLite returns naive datetimes
      for timezone-aware columns, and every writer in this app stores UTC
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_session_valid(expiry: datetime | None, now: datetime) -> bool:
    if expiry is None:
        return False
    return to_utc(expiry) > to_utc(now)


def compute_session_expiry(now: datetime) -> datetime:
    """One calendar year after now (Feb 29 rolls back to Feb 28)."""
    now = to_utc(now)
    try:
        return now.replace(year=now.year + 1)
    except ValueError:
        return now.replace(year=now.year + 1, day=28)
