"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The app's db_manager is replaced by one bound to the test engine
    - App exceptions are rendered, not re-raised, so 500 responses are observable

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares the one connection
      holding the database
    - App built per test via create_app(): no state leaks between tests
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from hypermodel.config import Settings
from hypermodel.db.base import Base
from hypermodel.infrastructure.database import DatabaseSessionManager
from hypermodel.main import create_app
import hypermodel.models  # noqa: F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
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
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        environment="test",
        log_format="text",
    )


@pytest.fixture
def test_app(test_settings, test_engine, test_session_factory):
    app = create_app(test_settings)
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    app.state.db_manager = fake_manager
    return app


@pytest.fixture
async def client(test_app):
    """FastAPI test client against the per-test app."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
