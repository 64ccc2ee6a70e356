# src/daily_focus/core/errors.py

from __future__ import annotations


class DailyFocusError(Exception):
    """Base class for all domain errors."""


class ValidationError(DailyFocusError):
    """Rejected input (empty name, unknown type/timing). Nothing was mutated."""


class NotFoundError(DailyFocusError):
    """Operation referenced a task id the store does not hold."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class PersistenceError(DailyFocusError):
    """Durable storage read/write failed."""


class FlowStateError(DailyFocusError):
    """Daily flow operation called from a state that does not allow it."""
