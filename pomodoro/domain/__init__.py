"""Domain layer - Pure business entities and errors"""

from .models import Category, Interval, IntervalState
from .errors import (
    PomodoroError,
    NoIntervalsError,
    IntervalNotRunningError,
    IntervalCompletedError,
    InvalidStateError,
    InvalidIDError,
)

__all__ = [
    "Category",
    "Interval",
    "IntervalState",
    "PomodoroError",
    "NoIntervalsError",
    "IntervalNotRunningError",
    "IntervalCompletedError",
    "InvalidStateError",
    "InvalidIDError",
]
