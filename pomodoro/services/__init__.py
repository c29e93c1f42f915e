"""Services layer - Business logic"""

from .category_service import next_category
from .timer_service import IntervalRunner
from .interval_service import IntervalService

__all__ = ["next_category", "IntervalRunner", "IntervalService"]
