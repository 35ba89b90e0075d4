"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Callable
from typing import Any

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = "uid-asha-0001"
OTHER_USER_ID = "uid-ravi-0002"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables, one per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def test_user() -> TokenUser:
    """Verified test user with a fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="asha.rao@example.com",
        email_verified=True,
        display_name="Asha Rao",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A second verified user."""
    return TokenUser(
        id=OTHER_USER_ID,
        email="ravi.kumar@example.com",
        email_verified=True,
        display_name="Ravi Kumar",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def make_auth_headers(
    auth_provider: JWTAuthProvider,
) -> Callable[[TokenUser], dict[str, str]]:
    """Build bearer headers for any user."""

    def _make(user: TokenUser) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth_provider.create_token(user)}"}

    return _make


@pytest.fixture
def auth_headers(
    make_auth_headers: Callable[[TokenUser], dict[str, str]], test_user: TokenUser
) -> dict[str, str]:
    """Authorization headers for the test user."""
    return make_auth_headers(test_user)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client wired to the in-memory database.

    Tokens are validated by the test auth provider, so requests act as
    whichever user the bearer header was built for.
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_listing_service,
        get_profile_service,
        get_slug_service,
    )
    from domain.services.listing_service import ListingService
    from domain.services.profile_service import ProfileService
    from domain.services.slug_service import SlugService
    from main import create_app

    app = create_app()

    slug_service = SlugService(uow_factory)
    profile_service = ProfileService(uow_factory, slug_service=slug_service)
    listing_service = ListingService(uow_factory, slug_service=slug_service)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_slug_service] = lambda: slug_service
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_listing_service] = lambda: listing_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
