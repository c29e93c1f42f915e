"""
Tests for the interval repositories.

Shared behaviour runs against both implementations (repo fixture);
SQL-only behaviour uses sql_repo.
"""

import datetime
import pytest

from pomodoro.domain.models import Category, IntervalState
from pomodoro.domain.errors import NoIntervalsError, InvalidIDError, IntervalCompletedError
from pomodoro.infra.repository import SQLIntervalRepository


@pytest.mark.asyncio
async def test_create_assigns_increasing_ids(repo, make_interval):
    first = await repo.create(make_interval())
    second = await repo.create(make_interval(category=Category.SHORT_BREAK))
    assert second > first

    stored = await repo.by_id(second)
    assert stored.id == second
    assert stored.category == Category.SHORT_BREAK
    assert stored.state == IntervalState.NOT_STARTED


@pytest.mark.asyncio
async def test_by_id_unknown_raises(repo):
    with pytest.raises(InvalidIDError):
        await repo.by_id(99)


@pytest.mark.asyncio
async def test_last_without_history_raises(repo):
    with pytest.raises(NoIntervalsError):
        await repo.last()


@pytest.mark.asyncio
async def test_last_returns_most_recent(repo, make_interval):
    await repo.create(make_interval(category=Category.POMODORO))
    last_id = await repo.create(make_interval(category=Category.LONG_BREAK))

    last = await repo.last()
    assert last.id == last_id
    assert last.category == Category.LONG_BREAK


@pytest.mark.asyncio
async def test_update_writes_progress_and_state(repo, make_interval):
    interval_id = await repo.create(make_interval(planned=10))
    interval = await repo.by_id(interval_id)
    started = datetime.datetime(2026, 1, 1, 9, 0)

    interval.start_time = started
    interval.actual_duration_seconds = 4
    interval.state = IntervalState.RUNNING
    await repo.update(interval)

    stored = await repo.by_id(interval_id)
    assert stored.start_time == started
    assert stored.actual_duration_seconds == 4
    assert stored.state == IntervalState.RUNNING


@pytest.mark.asyncio
async def test_update_keeps_category_and_planned_duration(repo, make_interval):
    interval_id = await repo.create(make_interval(category=Category.POMODORO, planned=10))
    interval = await repo.by_id(interval_id)

    interval.category = Category.LONG_BREAK
    interval.planned_duration_seconds = 99
    await repo.update(interval)

    stored = await repo.by_id(interval_id)
    assert stored.category == Category.POMODORO
    assert stored.planned_duration_seconds == 10


@pytest.mark.asyncio
async def test_update_unknown_raises(repo, make_interval):
    interval = make_interval()
    interval.id = 7
    with pytest.raises(InvalidIDError):
        await repo.update(interval)


@pytest.mark.asyncio
@pytest.mark.parametrize("state", [IntervalState.DONE, IntervalState.CANCELLED])
async def test_terminal_interval_is_immutable(repo, make_interval, state):
    interval_id = await repo.create(make_interval(state=state))
    interval = await repo.by_id(interval_id)

    interval.state = IntervalState.RUNNING
    with pytest.raises(IntervalCompletedError):
        await repo.update(interval)
    assert (await repo.by_id(interval_id)).state == state


@pytest.mark.asyncio
async def test_breaks_newest_first_and_limited(repo, make_interval):
    categories = [
        Category.POMODORO, Category.SHORT_BREAK,
        Category.POMODORO, Category.LONG_BREAK,
        Category.POMODORO, Category.SHORT_BREAK,
        Category.POMODORO,
    ]
    ids = [await repo.create(make_interval(category=c)) for c in categories]

    breaks = await repo.breaks(2)
    assert [b.id for b in breaks] == [ids[5], ids[3]]

    all_breaks = await repo.breaks(10)
    assert [b.category for b in all_breaks] == [
        Category.SHORT_BREAK, Category.LONG_BREAK, Category.SHORT_BREAK,
    ]
    assert await repo.breaks(0) == []


@pytest.mark.asyncio
async def test_memory_repository_returns_copies(memory_repo, make_interval):
    interval = make_interval(planned=5)
    interval_id = await memory_repo.create(interval)
    interval.actual_duration_seconds = 5
    assert interval.id is None

    fetched = await memory_repo.by_id(interval_id)
    fetched.actual_duration_seconds = 3
    assert (await memory_repo.by_id(interval_id)).actual_duration_seconds == 0


@pytest.mark.asyncio
async def test_sql_delete_all(sql_repo, make_interval):
    await sql_repo.create(make_interval())
    await sql_repo.create(make_interval())

    assert await sql_repo.delete_all() == 2
    with pytest.raises(NoIntervalsError):
        await sql_repo.last()


@pytest.mark.asyncio
async def test_sql_repository_uses_global_engine(tmp_path, make_interval):
    from pomodoro.infra.db import DatabaseEngine, init_db

    engine = await init_db(f"sqlite+aiosqlite:///{tmp_path / 'global.db'}")
    try:
        repo = SQLIntervalRepository()
        interval_id = await repo.create(make_interval(category=Category.SHORT_BREAK))
        # Separate repositories share the same store
        assert (await SQLIntervalRepository().by_id(interval_id)).category == Category.SHORT_BREAK
    finally:
        await engine.dispose()
    assert DatabaseEngine._instance is None
