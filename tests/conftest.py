"""Test fixtures: a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own in-memory SQLite engine (StaticPool keeps the
   single connection alive so every session sees the same database).
2. Tables are created from the ORM models, then get_db is overridden
   so the app talks to that engine.
3. The engine is disposed after the test: all test data vanishes.

The env vars below are set before voxai is imported so the settings
singleton (and the module-level engine) pick them up.
"""

import os

os.environ.setdefault("VOXAI_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("VOXAI_JWT_SECRET", "test-secret")
os.environ.setdefault("VOXAI_BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from voxai.db.engine import get_db, init_models  # noqa: E402
from voxai.main import app  # noqa: E402

TEST_USER_ID = "00000000-0000-0000-0000-000000000001"


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine):
    """Per-test session bound to the in-memory engine."""
    session = AsyncSession(bind=db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with the app's get_db and auth overridden for testing.

    Learn: We override get_current_user to return a fixed identity so
    protected routes work without real tokens.
    """
    from voxai.auth.dependencies import CurrentIdentity, get_current_user

    async def override_get_db():
        yield db_session

    def override_get_current_user():
        return CurrentIdentity(user_id=TEST_USER_ID)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauthenticated_client(db_session):
    """HTTP client WITHOUT auth override: for testing the real token flow."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
