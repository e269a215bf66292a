"""
QuoteVault Backend - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── access_policy:   AccessPolicy with the test master credential
    ├── make_quote:      Factory for transient Quote ORM objects
    ├── stored_quote:    Stubs the mock session to return a given quote
    ├── database:        Creates/drops tables in a throwaway SQLite file
    └── test_client:     HTTPX AsyncClient bound to a fresh app instance
"""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any quotevault import: settings and the engine are built
# at import time
_TEST_DIR = tempfile.mkdtemp(prefix="quotevault_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/quotevault_test.db"
os.environ["MASTER_CREDENTIAL"] = "master-override"
os.environ["LOG_LEVEL"] = "WARNING"

MASTER_CREDENTIAL = "master-override"

from quotevault.services.access_control import AccessPolicy  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_quote(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = quote
            result = await service.get_quote(mock_db_session, str(quote.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def access_policy():
    return AccessPolicy(master_secret=MASTER_CREDENTIAL)


@pytest.fixture
def make_quote():
    """
    Factory for transient Quote objects with every column populated.

    Usage:
        quote = make_quote(credential="secret123")
    """
    from quotevault.models.quote import Quote

    def _make(**overrides):
        now = datetime.now(timezone.utc)
        fields = {
            "id": uuid4(),
            "title": "Stay hungry, stay foolish",
            "content": "Closing line of a commencement speech.",
            "author": "Anonymous",
            "tags": ["motivation"],
            "credential": None,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Quote(**fields)

    return _make


@pytest.fixture
def stored_quote(mock_db_session):
    """
    Makes `await mock_db_session.execute(...)` yield the given quote.

    Usage:
        stored_quote(make_quote(credential="secret123"))
    """
    def _store(quote):
        result = MagicMock()
        result.scalar_one_or_none.return_value = quote
        mock_db_session.execute.return_value = result
        return quote

    return _store


@pytest_asyncio.fixture
async def database():
    """
    Creates all tables before the test and drops them afterwards.

    The engine is disposed at teardown so no pooled connection outlives the
    test's event loop.
    """
    from quotevault.database import Base, create_tables, engine

    await create_tables()
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    Provides an async HTTP test client for endpoint testing.

    How:   ASGITransport routes requests straight into a fresh create_app()
           instance. The lifespan does not run; the `database` fixture
           prepares the schema instead.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from quotevault.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
