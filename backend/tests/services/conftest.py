"""Service test fixtures — async DB, FastAPI test client, and an in-memory store.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager swapped for a Database over the test engine (readiness probes)
    - fake_store mirrors MemberSessionStore semantics, including the
      conditional update, without a database

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
"""

from dataclasses import replace

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import Database, get_db
import app.infrastructure.database as db_module
import app.models  # noqa: F401
from app.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = Database(test_engine)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


class FakeMemberStore:
    """In-memory MemberSessionStore. Records every update_session call."""

    def __init__(self):
        self.members = {}
        self.updates = []
        self.fail_updates_with: Exception | None = None

    def add(self, member):
        self.members[member.id] = member
        return member

    async def find_by_id(self, member_id):
        return self.members.get(member_id)

    async def find_by_id_and_session_token(self, member_id, token):
        member = self.members.get(member_id)
        if member is None or member.session_token != token:
            return None
        return member

    async def update_session(
        self, member, session_token, expiry, *, expected_token=None,
    ):
        self.updates.append((member.id, session_token, expiry, expected_token))
        if self.fail_updates_with is not None:
            raise self.fail_updates_with
        current = self.members.get(member.id)
        if current is None:
            return False
        if expected_token is not None and current.session_token != expected_token:
            return False
        self.members[member.id] = replace(
            current, session_token=session_token, session_expiry=expiry,
        )
        return True


@pytest.fixture
def fake_store():
    return FakeMemberStore()
