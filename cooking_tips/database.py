"""
Cooking Tips Backend — Database Session Management
====================================================

What:  Async SQLAlchemy engine, session factory, declarative Base and the
       per-request unit of work (session_scope).
Why:   Keeps all connection handling in one place; the SQL document store
       only ever sees an AsyncSession.
How:   One engine per process with connection pooling; one session per
       request that commits on success and rolls back on error.

Only used when TIP_STORE_BACKEND=sql. The engine is still created at import
time so Alembic and the health check share the same configuration.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from cooking_tips.config import settings


def _engine_options() -> dict:
    # SQLite (tests, local runs) uses a single-connection pool that rejects
    # pool sizing arguments.
    if settings.database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_recycle": 3600,
    }


engine = create_async_engine(
    settings.database_url,
    echo=settings.log_level == "DEBUG",
    **_engine_options(),
)

# expire_on_commit=False: rows stay readable after commit, the store maps
# them to documents after the write.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """
    One unit of work: commit on success, roll back on error, always close.

    Used by the tip service dependency: the session lives exactly as long
    as the request that needed it.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()
