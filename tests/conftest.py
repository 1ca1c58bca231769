"""
Shared test fixtures.

Tests run against an in-memory SQLite database by default. Set
TEST_DATABASE_URL (e.g. postgresql+asyncpg://...) to run against PostgreSQL.
"""
import os
from typing import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.accountable import Accountable, accountable_scope, bound_to_session
from models.base import Base
from models.user import User
from tests.factories import UserFactory

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def accountable_context() -> Generator[Accountable, None, None]:
    """Fresh actor context per test so impersonation and switches never leak."""
    with accountable_scope(enabled=True) as context:
        yield context


@pytest.fixture
async def db_session(accountable_context) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test with automatic cleanup."""
    engine_kwargs = {"poolclass": StaticPool} if TEST_DATABASE_URL.startswith("sqlite") else {"pool_pre_ping": True}
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **engine_kwargs)
    if TEST_DATABASE_URL.startswith("sqlite"):
        # Enforce FKs like PostgreSQL does
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        with bound_to_session(session, accountable_context):
            yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def override_get_db(db_session):
    """Dependency override for get_db that uses the test session."""
    async def _get_db():
        yield db_session
    return _get_db


@pytest.fixture
def app():
    """The FastAPI app instance under test."""
    from main import app as fastapi_app
    return fastapi_app


@pytest.fixture
async def async_client(app, override_get_db) -> AsyncGenerator[AsyncClient, None]:
    """Async test client sharing the test database session."""
    from core.database import get_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user(db_session) -> User:
    """A regular persisted user."""
    user = UserFactory(name="Test User")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def admin_user(db_session) -> User:
    """A persisted admin who may act as other users."""
    user = UserFactory(name="Admin User", is_admin=True)
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def users(db_session) -> list[User]:
    """Several persisted users."""
    users = UserFactory.build_batch(3)
    db_session.add_all(users)
    await db_session.flush()
    return users
