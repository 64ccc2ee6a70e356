# src/daily_focus/tasks/selection.py

from __future__ import annotations

import logging

from ..core.clock import SystemClock
from ..core.ports import Clock
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 10
MAX_DISTINCT_WEIGHTS = 5


def _priority_key(task: Task) -> tuple[int, str]:
    # weight desc, then name asc (case-sensitive)
    return (-task.weight, task.name)


class DailySelectionEngine:
    """
    Decision logic for the daily focus ritual.

    Reads the TaskStore; the only writes it makes are the last-active-date marker
    and, for complete_day(), completion toggles.
    """

    def __init__(
        self,
        store: TaskStore,
        *,
        clock: Clock | None = None,
        max_candidates: int = MAX_CANDIDATES,
        max_distinct_weights: int = MAX_DISTINCT_WEIGHTS,
    ) -> None:
        self._store = store
        self._clock: Clock = clock or SystemClock()
        self._max_candidates = max_candidates
        self._max_distinct_weights = max_distinct_weights

    # ---- day gating ----

    def is_new_day(self) -> bool:
        """True if nothing was recorded yet or the last active date is not today."""
        return self._store.last_active_date != self._clock.today()

    def update_last_active_date(self) -> None:
        self._store.set_last_active_date(self._clock.today())

    # ---- selection ----

    def get_elimination_candidates(self) -> list[Task]:
        """
        Ordered snapshot of the tasks to offer in one selection pass.

        Incomplete tasks only, sorted by weight desc then name asc, restricted to the
        top distinct weights, and capped in length.
        """
        pending = sorted((t for t in self._store.list_tasks() if not t.completed), key=_priority_key)

        top_weights = sorted({t.weight for t in pending}, reverse=True)[: self._max_distinct_weights]
        allowed = set(top_weights)

        candidates = [t for t in pending if t.weight in allowed][: self._max_candidates]
        logger.debug(
            "Elimination candidates: %d of %d pending (weights=%s)",
            len(candidates),
            len(pending),
            top_weights,
        )
        return candidates

    def get_today_tasks(self) -> list[Task]:
        """Tasks on today's focus list that are still open, highest weight first."""
        return sorted(
            (t for t in self._store.list_tasks() if t.today_selected and not t.completed),
            key=_priority_key,
        )

    def complete_day(self) -> int:
        """Mark every open task on today's list as completed. Returns how many."""
        today = self.get_today_tasks()
        for task in today:
            self._store.toggle_completed(task.id)
        logger.info("Day completed: %d tasks marked done.", len(today))
        return len(today)
