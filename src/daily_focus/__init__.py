# src/daily_focus/__init__.py

"""Daily focus: weight your tasks, then pick today's handful."""

__version__ = "0.1.0"
