"""Root conftest — shared test configuration."""

import os

import pytest

# Ensure tests never reach a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

from app.infrastructure.local_sessions import local_sessions  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_local_sessions():
    """Local sessions are process-global; start every test empty."""
    local_sessions.clear()
    yield
    local_sessions.clear()
