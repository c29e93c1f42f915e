"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Enum + Pydantic?
Categories and states are closed value types, so they are plain Enums with no
shared mutable instance. Pydantic coerces the stored strings back into those
Enums when loading rows from the database.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class Category(str, Enum):
    """Kind of interval: work or one of the two breaks"""

    POMODORO = "Pomodoro"
    SHORT_BREAK = "ShortBreak"
    LONG_BREAK = "LongBreak"

    @property
    def is_break(self) -> bool:
        return self in (Category.SHORT_BREAK, Category.LONG_BREAK)


class IntervalState(str, Enum):
    """
    Lifecycle of an interval.

    NOT_STARTED -> RUNNING -> DONE | CANCELLED, with RUNNING <-> PAUSED.
    DONE and CANCELLED are terminal.
    """

    NOT_STARTED = "NotStarted"
    RUNNING = "Running"
    PAUSED = "Paused"
    DONE = "Done"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (IntervalState.DONE, IntervalState.CANCELLED)


class Interval(BaseModel):
    """
    Represents one work or break session.

    Durations are whole seconds. category and planned_duration_seconds are
    fixed at creation; the repositories never write them on update.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    start_time: Optional[datetime] = None
    planned_duration_seconds: int = Field(..., ge=0)
    actual_duration_seconds: int = Field(default=0, ge=0)
    category: Category
    state: IntervalState = IntervalState.NOT_STARTED

    @property
    def remaining_seconds(self) -> int:
        return max(self.planned_duration_seconds - self.actual_duration_seconds, 0)
