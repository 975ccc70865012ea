"""Pytest configuration and fixtures for the cleanup sweep tests."""
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test env BEFORE any jobsweep imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

# Clear config cache so get_settings picks up test env
from jobsweep.config import get_settings

get_settings.cache_clear()

from jobsweep.main import app
from jobsweep.database import enable_sqlite_foreign_keys, get_db
from jobsweep.models.base import Base
from jobsweep.models import JobSearchCache, JobSearchLink, Posting, SearchTerm
from jobsweep.store import SweepStore

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test, with foreign keys enforced."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session: AsyncSession) -> SweepStore:
    return SweepStore(db_session, chunk_size=2)


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with overridden database dependency."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def add_posting(
    db: AsyncSession, expires_at: Optional[datetime], title: str = "Data Engineer"
) -> uuid.UUID:
    posting = Posting(
        job_title=title,
        company="Acme",
        job_url=f"https://jobs.example.com/{uuid.uuid4().hex}",
        expires_at=expires_at,
    )
    db.add(posting)
    await db.commit()
    return posting.id


async def add_search_term(
    db: AsyncSession,
    term: str,
    last_searched_at: Optional[datetime],
    search_count: int = 1,
) -> uuid.UUID:
    search_term = SearchTerm(
        canonical_term=term,
        raw_term=term.title(),
        search_count=search_count,
        last_searched_at=last_searched_at,
    )
    db.add(search_term)
    await db.commit()
    return search_term.id


async def add_link(db: AsyncSession, job_id: uuid.UUID, search_term_id: uuid.UUID) -> uuid.UUID:
    link = JobSearchLink(job_id=job_id, search_term_id=search_term_id, relevance_score=0.8)
    db.add(link)
    await db.commit()
    return link.id


async def add_legacy_entry(db: AsyncSession, search_hash: str, expires_at: datetime) -> uuid.UUID:
    entry = JobSearchCache(
        search_hash=search_hash,
        keywords="python developer",
        jobs=[{"title": "Python Developer"}],
        total_count=1,
        expires_at=expires_at,
    )
    db.add(entry)
    await db.commit()
    return entry.id


def days(n: float) -> timedelta:
    return timedelta(days=n)
