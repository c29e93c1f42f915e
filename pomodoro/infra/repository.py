"""
Repository Pattern Implementation.

Architecture Decision: Why Repository Pattern?
Separates data access logic from business logic. Makes it easy to:
- Switch database implementations
- Mock data for testing (see InMemoryIntervalRepository)
- Change data sources (local DB to cloud API)

The repository is the only owner of stored interval state. Services
read-modify-write through it by identifier.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro.domain.models import Category, Interval
from pomodoro.domain.errors import NoIntervalsError, InvalidIDError, IntervalCompletedError
from pomodoro.infra.db import IntervalModel, get_engine

BREAK_CATEGORIES = (Category.SHORT_BREAK.value, Category.LONG_BREAK.value)


class IntervalRepository(ABC):
    """
    Storage capability consumed by the category selector and the runner.

    update() only writes start_time, actual_duration_seconds and state:
    category and planned duration are fixed once an interval is created.
    """

    @abstractmethod
    async def create(self, interval: Interval) -> int:
        """Store a new interval and return its identifier"""

    @abstractmethod
    async def update(self, interval: Interval) -> None:
        """Persist the mutable fields of an existing interval"""

    @abstractmethod
    async def by_id(self, interval_id: int) -> Interval:
        """Get an interval by ID, raising InvalidIDError if absent"""

    @abstractmethod
    async def last(self) -> Interval:
        """Get the most recent interval, raising NoIntervalsError if none exist"""

    @abstractmethod
    async def breaks(self, n: int) -> List[Interval]:
        """Get up to n most recent break intervals, newest first"""

    @staticmethod
    def _ensure_mutable(stored: Interval) -> None:
        if stored.state.is_terminal:
            raise IntervalCompletedError()


class InMemoryIntervalRepository(IntervalRepository):
    """
    List-backed repository for tests and throwaway sessions.

    Identifiers are 1-based positions in the list. Every interval goes in and
    out as a copy so callers never share state with the store.
    """

    def __init__(self):
        self._intervals: List[Interval] = []
        self._lock = asyncio.Lock()

    async def create(self, interval: Interval) -> int:
        async with self._lock:
            interval_id = len(self._intervals) + 1
            self._intervals.append(interval.model_copy(update={"id": interval_id}))
            return interval_id

    async def update(self, interval: Interval) -> None:
        async with self._lock:
            stored = self._get(interval.id)
            self._ensure_mutable(stored)
            self._intervals[interval.id - 1] = stored.model_copy(update={
                "start_time": interval.start_time,
                "actual_duration_seconds": interval.actual_duration_seconds,
                "state": interval.state,
            })

    async def by_id(self, interval_id: int) -> Interval:
        async with self._lock:
            return self._get(interval_id).model_copy()

    async def last(self) -> Interval:
        async with self._lock:
            if not self._intervals:
                raise NoIntervalsError()
            return self._intervals[-1].model_copy()

    async def breaks(self, n: int) -> List[Interval]:
        async with self._lock:
            found: List[Interval] = []
            for interval in reversed(self._intervals):
                if len(found) >= n:
                    break
                if interval.category.is_break:
                    found.append(interval.model_copy())
            return found

    def _get(self, interval_id: Optional[int]) -> Interval:
        if interval_id is None or not 0 < interval_id <= len(self._intervals):
            raise InvalidIDError(interval_id)
        return self._intervals[interval_id - 1]


class SQLIntervalRepository(IntervalRepository):
    """
    Handles all Interval-related database operations.

    Converts between domain models (Pydantic) and ORM models (SQLAlchemy).
    Without an injected session every call opens its own, so several runners
    can share one repository.
    """

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = get_engine()
        return engine.get_session()

    async def create(self, interval: Interval) -> int:
        """Create a new interval"""
        session = await self._get_session()
        async with session:
            model = IntervalModel(
                start_time=interval.start_time,
                planned_duration_seconds=interval.planned_duration_seconds,
                actual_duration_seconds=interval.actual_duration_seconds,
                category=interval.category.value,
                state=interval.state.value
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return model.id

    async def update(self, interval: Interval) -> None:
        """Update progress and state of an existing interval"""
        session = await self._get_session()
        async with session:
            # ORM fetch-modify-commit so the terminal check sees the stored row
            result = await session.execute(
                select(IntervalModel).where(IntervalModel.id == interval.id)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise InvalidIDError(interval.id)
            self._ensure_mutable(Interval.model_validate(model))

            model.start_time = interval.start_time
            model.actual_duration_seconds = interval.actual_duration_seconds
            model.state = interval.state.value

            await session.commit()

    async def by_id(self, interval_id: int) -> Interval:
        """Get a specific interval by ID"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(IntervalModel).where(IntervalModel.id == interval_id)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise InvalidIDError(interval_id)
            return Interval.model_validate(model)

    async def last(self) -> Interval:
        """Get the most recently created interval"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(IntervalModel).order_by(IntervalModel.id.desc()).limit(1)
            )
            model = result.scalar_one_or_none()
            if model is None:
                raise NoIntervalsError()
            return Interval.model_validate(model)

    async def breaks(self, n: int) -> List[Interval]:
        """Get the n most recent short and long breaks"""
        if n <= 0:
            return []
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(IntervalModel)
                .where(IntervalModel.category.in_(BREAK_CATEGORIES))
                .order_by(IntervalModel.id.desc())
                .limit(n)
            )
            models = result.scalars().all()
            return [Interval.model_validate(m) for m in models]

    async def delete_all(self) -> int:
        """Delete all intervals. Returns count of deleted rows."""
        session = await self._get_session()
        async with session:
            result = await session.execute(delete(IntervalModel))
            await session.commit()
            return result.rowcount
