"""
Test infrastructure for the marketplace API.

Strategy
--------
- SQLite in-memory via aiosqlite replaces Postgres so the suite needs no
  running database.
- StaticPool makes every session share one in-memory connection; a new
  connection would otherwise see an empty database.
- The app's get_db dependency is overridden so every request uses the
  test session factory.
- Tables are created fresh before each test and dropped after.
- settings.IMAGES_DIR is pointed at a per-test temporary directory, so
  attachment files written by one test are never visible to another.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from marketplace.config import settings
from marketplace.database import Base, get_db
from marketplace.main import app

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def images_dir(tmp_path, monkeypatch):
    """Redirect attachment storage to a temporary directory."""
    directory = tmp_path / "images"
    monkeypatch.setattr(settings, "IMAGES_DIR", directory)
    return directory


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Live AsyncSession for service-level tests and direct ORM assertions."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
