"""Service test fixtures: in-memory store, SQLite store, FastAPI test client.

Invariants:
    - Every test gets a fresh store (in-memory or in-memory SQLite)
    - The in-memory store runs on a ticking clock: each create() is one second
      later than the previous one, so "newest first" is deterministic
    - accounts seeds one admin, one contributor and one buyer

Design Decisions:
    - client sets app.state.store directly: ASGITransport does not run the
      lifespan, so nothing else would populate it
    - sql_client overrides get_store with a session from the test engine,
      mirroring how production builds a SqlMarketplaceStore per request
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from jawastock.api.deps import get_store
from jawastock.db.base import Base
from jawastock.infrastructure.memory_store import InMemoryMarketplaceStore
from jawastock.infrastructure.sql_store import SqlMarketplaceStore
from jawastock.main import app

from tests.services.factories import Accounts, seed_accounts

START = datetime(2026, 1, 1, tzinfo=timezone.utc)


# ─── In-memory backend ───────────────────────────────────────────

@pytest.fixture
def clock():
    ticks = itertools.count()
    return lambda: START + timedelta(seconds=next(ticks))


@pytest.fixture
def store(clock):
    return InMemoryMarketplaceStore(clock)


@pytest.fixture
async def accounts(store) -> Accounts:
    return await seed_accounts(store)


@pytest.fixture
async def client(store):
    """FastAPI test client bound to the per-test in-memory store."""
    original = getattr(app.state, "store", None)
    app.state.store = store
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.store = original


# ─── SQL backend ─────────────────────────────────────────────────

@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def sql_store(test_session_factory):
    async with test_session_factory() as session:
        yield SqlMarketplaceStore(session)


@pytest.fixture
async def sql_client(test_session_factory):
    """FastAPI test client with get_store overridden to the SQLite store."""
    async def override_get_store():
        async with test_session_factory() as session:
            yield SqlMarketplaceStore(session)

    original = getattr(app.state, "store", None)
    app.state.store = None
    app.dependency_overrides[get_store] = override_get_store
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.store = original
