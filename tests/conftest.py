"""Pytest configuration and fixtures for the workflow service.

Uses app.main:app for HTTP tests and app.infrastructure.persistence.database
for DB-dependent fixtures. Env defaults are set before any app import so
Settings validation passes without a .env file.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef")
os.environ.setdefault("TELEMETRY_ENABLED", "false")

from collections.abc import Callable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

import app.infrastructure.persistence.database as database  # noqa: E402
from app.infrastructure.security.jwt import create_access_token  # noqa: E402
from app.main import app  # noqa: E402
from tests.fakes import TEAM_ID, USER_ID  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_dependency_overrides():
    """Each API test installs its own overrides."""
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_auth_headers() -> Callable[..., dict[str, str]]:
    """Build Authorization headers for a user in the given teams."""

    def _make(user_id: str = USER_ID, teams: tuple[str, ...] = (TEAM_ID,)) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id, teams)}"}

    return _make


@pytest.fixture
def auth_headers(make_auth_headers) -> dict[str, str]:
    """Headers for USER_ID as a member of TEAM_ID only."""
    return make_auth_headers()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL with migrations applied. Skips (pytest.skip) when SQL
    is not configured. Use @pytest.mark.requires_db to mark tests that need this
    fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Database not configured: set DATABASE_URL, then run: uv run alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
    await database.dispose_engine()
