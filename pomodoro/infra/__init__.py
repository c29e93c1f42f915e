"""Infrastructure layer - Database, persistence and configuration"""

from .db import DatabaseEngine, get_engine, init_db
from .models import IntervalModel
from .repository import IntervalRepository, InMemoryIntervalRepository, SQLIntervalRepository
from .config import IntervalConfig, Settings, get_settings

__all__ = [
    "DatabaseEngine",
    "get_engine",
    "init_db",
    "IntervalModel",
    "IntervalRepository",
    "InMemoryIntervalRepository",
    "SQLIntervalRepository",
    "IntervalConfig",
    "Settings",
    "get_settings",
]
