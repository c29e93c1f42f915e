"""
Category Service - Decides what kind of interval comes next.

Architecture Decision: Bounded look-back
Only the last interval and the last three breaks are read, so the decision
costs two small queries no matter how long the history is.
"""

import logging

from pomodoro.domain.models import Category
from pomodoro.domain.errors import NoIntervalsError
from pomodoro.infra.repository import IntervalRepository

logger = logging.getLogger(__name__)

# Short breaks between two long breaks
LONG_BREAK_EVERY = 3


async def next_category(repo: IntervalRepository) -> Category:
    """
    Determine the category of the next interval.

    A break is always followed by a Pomodoro. After a Pomodoro comes a short
    break, unless the last three breaks were all short, in which case a long
    break is due.

    Args:
        repo: Repository holding the interval history

    Returns:
        The next Category

    Raises:
        Any storage error other than NoIntervalsError, unchanged
    """
    try:
        last = await repo.last()
    except NoIntervalsError:
        return Category.POMODORO

    if last.category.is_break:
        return Category.POMODORO

    last_breaks = await repo.breaks(LONG_BREAK_EVERY)
    if len(last_breaks) < LONG_BREAK_EVERY:
        return Category.SHORT_BREAK

    if any(i.category == Category.LONG_BREAK for i in last_breaks):
        return Category.SHORT_BREAK

    logger.debug(f"{LONG_BREAK_EVERY} short breaks since the last long break")
    return Category.LONG_BREAK
