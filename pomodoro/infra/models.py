"""
SQLAlchemy ORM models.
Separated from db.py for cleaner imports.
"""

from .db import IntervalModel, Base

__all__ = ["IntervalModel", "Base"]
