#!/usr/bin/env python

"""
Pomodoro - Main Entry Point

Picks up the current interval (or creates the next one in the rotation) and
runs it in the terminal. Ctrl+C cancels the interval.

Usage:
    python main.py

Configuration:
    config/settings.yaml, ~/.config/pomodoro/settings.yaml or POMODORO_* env vars
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from pomodoro.domain.models import Interval
from pomodoro.domain.errors import PomodoroError
from pomodoro.infra.config import get_settings
from pomodoro.infra.db import init_db
from pomodoro.infra.repository import SQLIntervalRepository
from pomodoro.services.interval_service import IntervalService
from pomodoro.utils import format_duration

logger = logging.getLogger("pomodoro")


def show_start(interval: Interval):
    print(f"{interval.category.value}: {format_duration(interval.remaining_seconds)} remaining")


def show_tick(interval: Interval):
    sys.stdout.write(f"\r{format_duration(interval.remaining_seconds)} remaining ")
    sys.stdout.flush()


def show_complete(interval: Interval):
    print(f"\n{interval.category.value} finished after {format_duration(interval.actual_duration_seconds)}")


async def run():
    settings = get_settings()
    engine = await init_db(settings.get_db_url())

    repo = SQLIntervalRepository()
    service = IntervalService(settings.interval_config(repo))

    cancel = asyncio.Event()
    if sys.platform != "win32":
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, cancel.set)

    try:
        interval = await service.get_interval()
        # Only runner in this process: pick up an interval a previous run left RUNNING
        await service.start(interval.id, cancel, show_start, show_tick, show_complete,
                            take_over=True)
        if cancel.is_set():
            print("\nCancelled")
    finally:
        await engine.dispose()


def main():
    """Main entry point"""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run())
    except PomodoroError as e:
        logger.error(f"{e}")
        return 1
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        return 1
    except KeyboardInterrupt:
        # No signal handler on Windows; the interval stays RUNNING and is taken over next time
        logger.warning("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
