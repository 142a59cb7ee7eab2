"""Test fixtures for the URL shortener application."""

import os

# Settings are read at import time, so the environment goes first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["BASE_URL"] = "http://short.test"
os.environ["REQUEST_LOGGING_ENABLED"] = "true"

from typing import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from shortlink.db.session import get_db  # noqa: E402
from shortlink.main import app  # noqa: E402
# Import models to ensure they're registered with SQLModel metadata
from shortlink.models.click import ClickEvent  # noqa: E402,F401
from shortlink.models.url import ShortURL  # noqa: E402,F401
from shortlink.repositories.click_repository import ClickRepository  # noqa: E402
from shortlink.repositories.url_repository import URLRepository  # noqa: E402
from shortlink.services.location import StubLocationResolver  # noqa: E402
from shortlink.services.redirect import RedirectService  # noqa: E402
from shortlink.services.shortener import ShortenedURLService  # noqa: E402
from shortlink.services.stats import StatsService  # noqa: E402
from tests.utils import FakeClock  # noqa: E402


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory SQLite engine per test."""
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session on the per-test database. Services commit through it."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def file_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File backed SQLite engine, for tests that need several connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'shortlink.db'}",
        connect_args={"timeout": 30},
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(file_engine) -> Callable[[], AsyncSession]:
    """Factory for independent sessions on the file backed database."""
    return async_sessionmaker(
        bind=file_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest.fixture
def clock() -> FakeClock:
    """Controllable clock starting at a fixed moment."""
    return FakeClock()


@pytest.fixture
def url_repository() -> URLRepository:
    return URLRepository()


@pytest.fixture
def click_repository() -> ClickRepository:
    return ClickRepository()


@pytest.fixture
def shortener_service(url_repository, clock) -> ShortenedURLService:
    return ShortenedURLService(
        url_repository=url_repository,
        base_url="http://short.test",
        clock=clock,
    )


@pytest.fixture
def redirect_service(url_repository, click_repository, clock) -> RedirectService:
    return RedirectService(
        url_repository=url_repository,
        click_repository=click_repository,
        locator=StubLocationResolver(labels=["Testville, TS"]),
        clock=clock,
    )


@pytest.fixture
def stats_service(url_repository) -> StatsService:
    return StatsService(url_repository=url_repository)


@pytest.fixture
def override_get_db(test_db):
    """Override the get_db dependency for testing."""
    async def _override_get_db():
        yield test_db

    return _override_get_db


@pytest_asyncio.fixture
async def client(override_get_db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process, on the per-test database."""
    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()
