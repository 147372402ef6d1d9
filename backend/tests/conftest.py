"""
Quotebook Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.
How:   Every test gets a private in-memory SQLite database (aiosqlite with
       a StaticPool so all sessions share one connection), with the schema
       created from the ORM metadata.

Fixture Hierarchy:
    db_engine        fresh in-memory engine + schema
    ├── db_session   AsyncSession bound to that engine
    │   └── storage  SQLAlchemyStorage over db_session
    │       └── sample_quotes  a small seeded catalog
    └── test_client  HTTPX AsyncClient with get_db_session overridden
"""

import os

# Settings are read at import time; override them before any quotebook import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_ON_STARTUP"] = "false"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quotebook.database import Base, get_db_session
from quotebook.models.quote import Quote  # noqa: F401
from quotebook.models.source import Source  # noqa: F401
from quotebook.schemas.quote import QuoteCreate
from quotebook.services.quote_service import quote_service
from quotebook.services.storage import SQLAlchemyStorage


SAMPLE_QUOTES = [
    {
        "text": "The only way to do great work is to love what you do.",
        "author": "Steve Jobs",
        "category": "Success",
        "tags": "work,passion,greatness",
        "source_title": "Stanford Commencement Address",
        "source_type": "speech",
        "verification_status": "verified",
        "quality_score": 9,
    },
    {
        "text": "Stay hungry, stay foolish, and never stop learning new things.",
        "author": "Steve Jobs",
        "category": "Learning",
        "tags": "curiosity,learning",
        "source_title": "Stanford Commencement Address",
        "source_type": "speech",
        "verification_status": "verified",
        "quality_score": 7,
    },
    {
        "text": "In the middle of difficulty lies opportunity.",
        "author": "Albert Einstein",
        "category": "Opportunity",
        "tags": "difficulty,opportunity",
        "verification_status": "disputed",
        "quality_score": 6,
    },
    {
        "text": "Believe you can and you're halfway there.",
        "author": "Theodore Roosevelt",
        "category": "Success",
        "tags": "belief,confidence",
        "quality_score": 4,
    },
]


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def storage(db_session) -> SQLAlchemyStorage:
    return SQLAlchemyStorage(db_session)


@pytest_asyncio.fixture
async def sample_quotes(storage, db_session):
    """
    Inserts SAMPLE_QUOTES through the service (so they pass validation)
    and returns the created QuoteResponse objects in insertion order.
    """
    created = []
    for data in SAMPLE_QUOTES:
        created.append(await quote_service.create_quote(storage, QuoteCreate(**data)))
    await db_session.commit()
    return created


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the app over ASGITransport.

    Requests use sessions from the per-test engine, with the same
    commit/rollback behavior as the production dependency. ASGITransport
    does not run the lifespan, so no startup seeding happens.
    """
    from quotebook.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def quote_payload():
    """A valid quote body for POST/PUT."""
    return {
        "text": "Do what you can, with what you have, where you are.",
        "author": "Theodore Roosevelt",
        "category": "Action",
        "tags": "action,resourcefulness",
        "source_url": "https://example.com/roosevelt",
        "quality_score": 8,
    }
