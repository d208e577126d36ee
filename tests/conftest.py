"""
Shared pytest fixtures for TaleForge tests.

This module provides:
- Settings pointing at a throwaway SQLite database
- A TokenService signed with the test key
- An AsyncSession bound to a fresh schema for service tests
- A FastAPI TestClient running the full application lifespan
"""

from collections.abc import AsyncGenerator, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from taleforge.api.main import create_app
from taleforge.core.config import Settings
from taleforge.core.security import TokenService
from taleforge.models import Base

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        secret_key=TEST_SECRET,
        jwt_secret_key="",
        log_level="DEBUG",
    )


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Session on a freshly created schema."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'services.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Test client with the lifespan (database init) running."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client