"""Pytest configuration and shared fixtures.

Each test gets its own SQLite file so state never leaks between tests.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from squawk.config import Settings
from squawk.core.passwords import PasswordHasher
from squawk.db.session import init_db
from squawk.main import create_app
from squawk.storage.sql_store import SqlUserStore

TEST_SECRET = "test-secret-key-that-is-long-enough-0123"
TEST_WEBHOOK_KEY = "test-webhook-key"
TEST_ROUNDS = 4


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'squawk_test.db'}",
        secret_key=TEST_SECRET,
        bcrypt_rounds=TEST_ROUNDS,
        platform="dev",
        webhook_api_key=TEST_WEBHOOK_KEY,
        rate_limit_enabled=False,
    )


@pytest_asyncio.fixture
async def app(settings):
    """App with tables created (ASGITransport does not run lifespan)."""
    application = create_app(settings)
    await init_db(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(app):
    async with app.state.session_maker() as session:
        yield session


@pytest.fixture
def store(db_session) -> SqlUserStore:
    return SqlUserStore(db_session)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(TEST_ROUNDS)


@pytest_asyncio.fixture
async def test_user(store, hasher):
    """User a@b.com / secret1 committed to the DB."""
    return await store.create_user("a@b.com", hasher.hash("secret1"))
