"""Auth Events — structured observations emitted instead of log calls in core logic.

Invariants:
    - Events are plain values; emitting one never changes an authentication decision
    - member_id is whatever identity the request claimed (may be None)
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from app.core.domain_types import AuthEventKind


@dataclass(frozen=True)
class AuthEvent:
    kind: AuthEventKind
    member_id: str | None = None
    detail: dict[str, Any] = field(default_factory=dict)


EventSink = Callable[[AuthEvent], None]
