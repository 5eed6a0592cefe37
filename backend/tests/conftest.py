"""Shared test fixtures - uses a throwaway async SQLite file for isolated testing."""

import os
import tempfile

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from band_dynamics.db.database import Base, get_db
from helpers import FixedRandom

# File-backed SQLite (no Docker needed); NullPool keeps connections off any one event loop
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), f"band_dynamics_test_{os.getpid()}.db")
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


async def _override_get_db():
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    # Import all models so Base.metadata knows about them
    import band_dynamics.models  # noqa: F401

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db():
    """Direct async DB session for service-level tests."""
    async with test_session_factory() as session:
        yield session
        await session.commit()


@pytest.fixture
def always_fire(monkeypatch):
    """Make the shared chemistry service fire every candidate with p > 0."""
    from band_dynamics.services.chemistry_service import chemistry_service

    monkeypatch.setattr(chemistry_service, "rng", FixedRandom(0.0))
    return chemistry_service


@pytest.fixture
def never_fire(monkeypatch):
    """Make the shared chemistry service fire nothing."""
    from band_dynamics.services.chemistry_service import chemistry_service

    monkeypatch.setattr(chemistry_service, "rng", FixedRandom(0.999999))
    return chemistry_service


@pytest.fixture
async def client():
    """Async HTTP test client with test DB override."""
    from band_dynamics.main import app

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def session_factory():
    """Session factory for tests that need more than one concurrent session."""
    return test_session_factory
