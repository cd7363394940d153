"""Database — async engine for the members table, per-request sessions, error translation.

Invariants:
    - A session that raises is rolled back before the error leaves get_db
    - Any SQLAlchemyError from a member-store operation surfaces as DatabaseError
      naming that operation (find_by_id, update_session, ...), never raw
    - ping() never raises; readiness reads its bool
    - expire_on_commit=False: Member snapshots are built after commit without lazy loads

Design Decisions:
    - Database wraps an existing engine: tests hand it the SQLite engine, startup
      hands it the pooled asyncpg engine built by init_db
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core.errors import DatabaseError

logger = logging.getLogger(__name__)

_FAILURE_MESSAGES: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "member row constraint violated"),
    (OperationalError, "members database unreachable"),
    (DBAPIError, "driver rejected member statement"),
)


def translate_db_error(exc: SQLAlchemyError, operation: str) -> DatabaseError:
    message = next(
        (msg for kind, msg in _FAILURE_MESSAGES if isinstance(exc, kind)),
        "member statement failed",
    )
    logger.error(
        f"Member store {operation} failed: {exc}",
        extra={"operation": operation},
    )
    return DatabaseError(message, operation)


@asynccontextmanager
async def store_operation(db: AsyncSession, operation: str):
    """Run one member-store operation; roll back and translate on failure."""
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        raise translate_db_error(e, operation) from e


class Database:
    """Session factory, readiness ping and shutdown over one async engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self.session_factory()
        try:
            yield session
        except DatabaseError:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            raise translate_db_error(e, "request") from e
        finally:
            await session.close()

    async def ping(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError:
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Set by the app lifespan
db_manager: Database | None = None


def init_db(database_url: str, pool_size: int = 20, max_overflow: int = 10) -> Database:
    global db_manager
    engine = create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )
    db_manager = Database(engine)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one AsyncSession per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
