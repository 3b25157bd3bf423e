"""Shared test fixtures.

Tests run against a fresh in-memory SQLite database per test; Redis is never
initialised, so rate limiting is bypassed.
"""

from __future__ import annotations

import os

os.environ["CAMPUS_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CAMPUS_JWT_SECRET"] = "test-secret-with-enough-bytes-for-hs256"
os.environ["CAMPUS_LOG_FORMAT"] = "console"

from collections.abc import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from campus.auth.jwt import create_access_token  # noqa: E402
from campus.config import get_settings  # noqa: E402
from campus.database import close_db, create_all, get_session, init_db  # noqa: E402
from campus.main import create_app  # noqa: E402

get_settings.cache_clear()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema in a new in-memory database."""
    await init_db(get_settings().database_url)
    await create_all()
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for test setup and assertions."""
    async for session in get_session():
        yield session
        break


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client over the ASGI app (no lifespan, no Redis)."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _auth(uid: str, role: str, name: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(uid, role, name)}"}


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Factory for bearer headers: ``auth_headers("s1", "student")``."""
    return _auth


@pytest.fixture
def student_headers() -> dict[str, str]:
    return _auth("student-1", "student", "Ama Mensah")


@pytest.fixture
def teacher_headers() -> dict[str, str]:
    return _auth("teacher-1", "teacher", "Kofi Boateng")


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _auth("admin-1", "admin", "Efua Admin")
