"""Pomodoro interval engine: category rotation and a tick-driven interval runner"""

__version__ = "0.1.0"
