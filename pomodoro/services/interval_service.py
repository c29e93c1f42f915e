"""
Interval Service - Creates, starts and pauses intervals.

Thin layer over the repository, the category selector and the runner.
Every operation works on the stored interval by identifier so that a stale
copy never overwrites progress counted by the runner.
"""

import asyncio
import datetime
import logging
from typing import Optional

from pomodoro.domain.models import Interval, IntervalState
from pomodoro.domain.errors import (
    NoIntervalsError,
    IntervalNotRunningError,
    IntervalCompletedError,
)
from pomodoro.infra.config import IntervalConfig
from pomodoro.services.category_service import next_category
from pomodoro.services.timer_service import IntervalRunner, Callback

logger = logging.getLogger(__name__)


class IntervalService:
    """Lifecycle operations for the current interval."""

    def __init__(self, config: IntervalConfig, runner: Optional[IntervalRunner] = None):
        self.config = config
        self.runner = runner or IntervalRunner(config)

    @property
    def repo(self):
        return self.config.repo

    async def new_interval(self) -> Interval:
        """Create and store the next interval in the rotation"""
        category = await next_category(self.repo)
        interval = Interval(
            category=category,
            planned_duration_seconds=self.config.duration_for(category),
        )
        interval.id = await self.repo.create(interval)
        logger.info(
            f"Created interval {interval.id}: {category.value}, "
            f"{interval.planned_duration_seconds}s planned"
        )
        return interval

    async def get_interval(self) -> Interval:
        """
        Get the interval to work on.

        Returns the last interval while it can still run (not started,
        running or paused), otherwise creates the next one.
        """
        try:
            last = await self.repo.last()
        except NoIntervalsError:
            return await self.new_interval()

        if not last.state.is_terminal:
            return last
        return await self.new_interval()

    async def start(self, interval_id: int, cancel: asyncio.Event,
                    on_start: Optional[Callback] = None,
                    on_tick: Optional[Callback] = None,
                    on_complete: Optional[Callback] = None,
                    take_over: bool = False) -> None:
        """
        Start or resume an interval and run it until it stops.

        An interval left RUNNING by a failed or killed run is normally assumed
        to belong to another runner and is left alone. Pass take_over=True when
        the caller knows it is the only runner, to drive it again from its
        stored progress.

        Raises:
            IntervalCompletedError: The interval is done or cancelled
        """
        interval = await self.repo.by_id(interval_id)

        if interval.state == IntervalState.RUNNING:
            if not take_over:
                logger.warning(f"Interval {interval_id} is already running")
                return
            logger.info(f"Taking over interval {interval_id} at {interval.actual_duration_seconds}s")
            await self.runner.run(interval_id, cancel, on_start, on_tick, on_complete)
            return

        if interval.state in (IntervalState.NOT_STARTED, IntervalState.PAUSED):
            if interval.state == IntervalState.NOT_STARTED:
                interval.start_time = datetime.datetime.now()
            interval.state = IntervalState.RUNNING
            await self.repo.update(interval)
            await self.runner.run(interval_id, cancel, on_start, on_tick, on_complete)
            return

        # Done or cancelled
        raise IntervalCompletedError()

    async def pause(self, interval_id: int) -> Interval:
        """
        Pause a running interval.

        The runner notices on its next tick and returns; resume with start().

        Raises:
            IntervalNotRunningError: The interval is not running
        """
        interval = await self.repo.by_id(interval_id)
        if interval.state != IntervalState.RUNNING:
            raise IntervalNotRunningError()

        interval.state = IntervalState.PAUSED
        await self.repo.update(interval)
        logger.info(f"Interval {interval_id} pause requested")
        return interval
