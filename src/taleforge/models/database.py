"""Engine and session lifecycle for the user and story stores.

One engine per process, created in the app lifespan. Request handlers get
a session through :func:`get_session`.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for the users and stories tables."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(database_url: str, **engine_kwargs: Any) -> None:
    """Create the engine and session factory.

    Args:
        database_url: postgresql+asyncpg://... or sqlite+aiosqlite://...
        **engine_kwargs: Passed through to create_async_engine (pool sizing etc.)
    """
    global _engine, _session_factory

    engine_kwargs.setdefault("pool_pre_ping", True)
    _engine = create_async_engine(database_url, **engine_kwargs)
    # Stories are returned after commit, so keep loaded attributes
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False, autoflush=False)


def get_engine() -> AsyncEngine:
    """Return the engine, or raise RuntimeError before init_db has run."""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db first.")
    return _engine


async def create_tables() -> None:
    """Create the users and stories tables if they are missing."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping() -> None:
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Per-request session; rolled back if the handler raises."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db first.")
    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def close_db() -> None:
    """Dispose of the engine on shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
