"""Route test fixtures — async DB + FastAPI test client + seeded accounts.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - get_settings overridden: uploads land in a per-test tmp_path
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory with StaticPool: one connection, so every session sees the same DB
    - Accounts created through the register endpoint: tests exercise the real flow
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from lessonbook.config import Settings, get_settings
from lessonbook.db.base import Base
from lessonbook.infrastructure.database import get_db, DatabaseSessionManager
import lessonbook.infrastructure.database as db_module
import lessonbook.models  # noqa: F401
from lessonbook.main import app
from tests.services.booking_helpers import register


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
def test_settings(tmp_path):
    return Settings(uploads_dir=str(tmp_path / "uploads"))


@pytest.fixture
async def client(test_engine, test_session_factory, test_settings):
    """FastAPI test client with DB and settings dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def teacher(client):
    return await register(
        client, "Teacher", "teacher@example.com",
        name="Tina Teacher", instrument="Piano,Guitar",
    )


@pytest.fixture
async def student(client):
    return await register(client, "Student", "student@example.com", name="Sam Student")

