"""
Test configuration and fixtures for the Lara4 API.

Every test function gets its own SQLite database file, so rows created by
one test (or by a rolled-back transaction) can be counted precisely.
"""

import os
import tempfile

from dotenv import load_dotenv

load_dotenv()

# The app builds its engine at import time; requests in tests go through the
# per-test engine below because get_db is overridden.
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{tempfile.mktemp(suffix='.db')}"
os.environ["FRONTEND_URL"] = "http://localhost:3000"

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.features.auth.models.provider import Provider  # noqa: F401
from app.features.auth.models.user import User
from app.features.auth.schemas.auth import ProviderProfile
from app.features.auth.services.reconciliation import RequestContext
from app.features.auth.utils.security import create_access_token, hash_password
from app.features.phones.models.phone import Phone  # noqa: F401
from app.features.posts.models.post import Post  # noqa: F401
from app.features.reservations.models.reservation import Reservation  # noqa: F401
from app.features.settings.models.setting import Setting  # noqa: F401
from app.platform.db.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    event.listen(test_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False, autocommit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_app():
    """FastAPI application."""
    from app.main import app

    return app


@pytest_asyncio.fixture
async def client(test_app, session_factory):
    """
    HTTP client bound to the app in-process, with get_db pointed at the test database.
    Redirects are not followed so tests can inspect them.
    """
    from app.platform.db.session import get_db

    async def override_get_db():
        async with session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client

    test_app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(session_factory):
    async def _make_user(email="existing@example.com", **overrides):
        values = dict(
            email=email,
            name="Existing User",
            password_hash=hash_password("Secret123"),
        )
        values.update(overrides)
        async with session_factory() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token(data={"sub": str(user.id), "email": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def count_rows(session_factory):
    """Count rows of a model from a fresh session."""
    async def _count(model) -> int:
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))

    return _count


@pytest.fixture
def google_profile():
    return ProviderProfile(
        id="google-sub-123",
        email="Jane.Doe@Example.com",
        name="Jane Doe",
        given_name="Jane",
        family_name="Doe",
        avatar="https://lh3.googleusercontent.com/a/jane.png",
        token="ya29.access-token",
    )


@pytest.fixture
def request_context():
    return RequestContext(
        ip_address="203.0.113.7",
        browser="Chrome",
        platform="macOS",
        device="desktop",
        country="NG",
    )
