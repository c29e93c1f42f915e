"""
Timer Service - Drives a running interval until it is done, cancelled or paused.

Architecture Decision: One queue, one wait point
The periodic ticker, the expiry timer and the cancellation watcher only put
events into a single asyncio.Queue. The runner takes them out one at a time,
so tick, expiry and cancel handling never overlap and are serviced in the
order they arrived. Every branch re-reads the interval from the repository,
which is what makes an external pause visible on the next tick.
"""

import asyncio
import enum
import logging
from typing import Callable, Optional

from pomodoro.domain.models import Interval, IntervalState
from pomodoro.domain.errors import InvalidStateError, IntervalCompletedError
from pomodoro.infra.config import IntervalConfig

logger = logging.getLogger(__name__)

# Observation hook, called inline on the runner with a copy of the interval
Callback = Callable[[Interval], None]


def _ignore(interval: Interval) -> None:
    pass


class _Event(enum.Enum):
    TICK = "tick"
    EXPIRE = "expire"
    CANCEL = "cancel"


class Ticker:
    """
    Periodic timer on the event loop clock.

    Puts a TICK into the queue at origin + k * period for k = 1..count.
    Deadlines are absolute, so a slow consumer does not make it drift.
    """

    def __init__(self, queue: asyncio.Queue, period: float, count: int):
        self._queue = queue
        self._period = period
        self._count = count
        self._fired = 0
        self._origin = 0.0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handle: Optional[asyncio.TimerHandle] = None

    def start(self, origin: float) -> None:
        self._loop = asyncio.get_running_loop()
        self._origin = origin
        self._schedule()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        if self._fired >= self._count:
            self._handle = None
            return
        when = self._origin + (self._fired + 1) * self._period
        self._handle = self._loop.call_at(when, self._fire)

    def _fire(self) -> None:
        self._fired += 1
        self._queue.put_nowait(_Event.TICK)
        self._schedule()


class IntervalRunner:
    """
    Owns the progression of one interval at a time.

    Callers must not run the same interval twice concurrently; the runner
    does no locking of its own.
    """

    def __init__(self, config: IntervalConfig, tick_seconds: float = 1.0):
        """
        Args:
            config: Engine configuration holding the repository
            tick_seconds: Wall-clock length of one counted second
        """
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be greater than zero")
        self.config = config
        self.tick_seconds = tick_seconds

    @property
    def repo(self):
        return self.config.repo

    async def run(self, interval_id: int, cancel: asyncio.Event,
                  on_start: Optional[Callback] = None,
                  on_tick: Optional[Callback] = None,
                  on_complete: Optional[Callback] = None) -> None:
        """
        Tick the interval once per second until it expires, is cancelled or
        is found paused.

        Args:
            interval_id: Identifier of a stored interval
            cancel: Set it to cancel the interval; checked between ticks
            on_start: Called once before the first tick
            on_tick: Called after each persisted tick
            on_complete: Called when the interval expires, before it is persisted

        Raises:
            InvalidIDError: The interval does not exist
            IntervalCompletedError: The interval is already done or cancelled
            InvalidStateError: More time was counted than planned
            Any storage error, unchanged; progress persisted so far is kept
        """
        on_start = on_start or _ignore
        on_tick = on_tick or _ignore
        on_complete = on_complete or _ignore

        interval = await self.repo.by_id(interval_id)
        if interval.state.is_terminal:
            raise IntervalCompletedError()
        if interval.actual_duration_seconds > interval.planned_duration_seconds:
            raise InvalidStateError(
                f"Interval {interval_id} counted {interval.actual_duration_seconds}s "
                f"of {interval.planned_duration_seconds}s"
            )

        # Expiry is computed once here and never moved
        remaining = interval.remaining_seconds
        loop = asyncio.get_running_loop()
        events: asyncio.Queue = asyncio.Queue()
        origin = loop.time()

        expiry = loop.call_at(origin + remaining * self.tick_seconds, events.put_nowait, _Event.EXPIRE)
        # The last counted second belongs to the expiry, not to a tick
        ticker = Ticker(events, self.tick_seconds, max(remaining - 1, 0))
        ticker.start(origin)

        watcher = asyncio.ensure_future(cancel.wait())

        def _on_cancel(future: asyncio.Future) -> None:
            if not future.cancelled():
                events.put_nowait(_Event.CANCEL)

        watcher.add_done_callback(_on_cancel)

        logger.info(
            f"Interval {interval_id} ({interval.category.value}) running, "
            f"{remaining}s remaining"
        )
        try:
            on_start(interval.model_copy())
            while True:
                event = await events.get()
                if event is _Event.TICK:
                    if not await self._tick(interval_id, on_tick):
                        return
                elif event is _Event.EXPIRE:
                    await self._expire(interval_id, on_complete)
                    return
                else:
                    await self._cancel(interval_id)
                    return
        finally:
            ticker.stop()
            expiry.cancel()
            watcher.cancel()

    async def _tick(self, interval_id: int, on_tick: Callback) -> bool:
        """Count one second. Returns False when the interval was paused."""
        interval = await self.repo.by_id(interval_id)
        if interval.state == IntervalState.PAUSED:
            logger.info(f"Interval {interval_id} paused at {interval.actual_duration_seconds}s")
            return False

        interval.actual_duration_seconds += 1
        await self.repo.update(interval)
        logger.debug(
            f"Interval {interval_id}: {interval.actual_duration_seconds}s"
            f"/{interval.planned_duration_seconds}s"
        )
        on_tick(interval.model_copy())
        return True

    async def _expire(self, interval_id: int, on_complete: Callback) -> None:
        interval = await self.repo.by_id(interval_id)
        interval.state = IntervalState.DONE
        interval.actual_duration_seconds = interval.planned_duration_seconds
        on_complete(interval.model_copy())
        await self.repo.update(interval)
        logger.info(f"Interval {interval_id} ({interval.category.value}) done")

    async def _cancel(self, interval_id: int) -> None:
        interval = await self.repo.by_id(interval_id)
        interval.state = IntervalState.CANCELLED
        await self.repo.update(interval)
        logger.info(f"Interval {interval_id} cancelled at {interval.actual_duration_seconds}s")
