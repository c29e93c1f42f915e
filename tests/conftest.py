"""
Pytest configuration and fixtures.
"""

import sys
from pathlib import Path
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from pomodoro.domain.models import Category, Interval, IntervalState
from pomodoro.infra.db import Base
from pomodoro.infra.config import IntervalConfig
from pomodoro.infra.repository import InMemoryIntervalRepository, SQLIntervalRepository


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Create a throwaway SQLite database for testing"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create a new session for a test"""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def memory_repo():
    return InMemoryIntervalRepository()


@pytest.fixture
def sql_repo(db_session):
    return SQLIntervalRepository(session=db_session)


@pytest.fixture(params=["memory", "sql"])
def repo(request, db_session):
    """Every repository implementation, for behaviour both must share"""
    if request.param == "memory":
        return InMemoryIntervalRepository()
    return SQLIntervalRepository(session=db_session)


@pytest.fixture
def config(memory_repo):
    return IntervalConfig(memory_repo)


def _make_interval(category=Category.POMODORO, planned=3, actual=0,
                   state=IntervalState.NOT_STARTED) -> Interval:
    return Interval(
        category=category,
        planned_duration_seconds=planned,
        actual_duration_seconds=actual,
        state=state,
    )


@pytest.fixture
def make_interval():
    """Factory for unsaved intervals"""
    return _make_interval
