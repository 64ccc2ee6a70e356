# src/daily_focus/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import date
from typing import Any

from ..core.clock import SystemClock, uuid_id_generator
from ..core.errors import NotFoundError
from ..core.ports import Clock, IdGenerator, KeyValueStorage
from .task_models import Task, TaskTiming, TaskType, clean_name

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
LAST_ACTIVE_DATE_KEY = "last_active_date"

TaskListener = Callable[[tuple[Task, ...]], None]

SAMPLE_TASKS: tuple[tuple[str, TaskType, TaskTiming], ...] = (
    ("Read a book", TaskType.WANT, TaskTiming.LATER),
    ("Pay bills", TaskType.NEED, TaskTiming.TODAY),
    ("Exercise", TaskType.BOTH, TaskTiming.TODAY),
)


class TaskStore:
    """
    Authoritative in-memory task set plus the last-active-date marker.

    Mutations replace the whole snapshot (a tuple, newest task first) and then
    write the full state through the injected key-value storage. Storage failures
    are logged and never raised: the in-memory change always stands.

    Listeners registered with subscribe() get the new snapshot after every mutation.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
    ) -> None:
        self._storage = storage
        self._clock: Clock = clock or SystemClock()
        self._new_id: IdGenerator = id_generator or uuid_id_generator
        self._tasks: tuple[Task, ...] = ()
        self._last_active_date: date | None = None
        self._listeners: list[TaskListener] = []

    # ---- loading ----

    def load(self, *, seed_samples: bool = True) -> None:
        """
        Replace in-memory state with what storage holds.

        - tasks are rebuilt from records, weights recomputed
        - no tasks record at all -> sample tasks (if seed_samples)
        - read/decode failure -> empty task set
        """
        tasks: tuple[Task, ...] = ()
        seeded = False
        try:
            raw = self._storage.get(TASKS_KEY)
            if raw is None:
                if seed_samples:
                    tasks = self._sample_tasks()
                    seeded = True
                    logger.info("No stored tasks; seeded %d sample tasks.", len(tasks))
            else:
                tasks = tuple(self._decode_tasks(raw))
        except Exception:
            logger.exception("Failed to load tasks from storage; starting empty.")
            tasks = ()

        last_active: date | None = None
        try:
            raw_date = self._storage.get(LAST_ACTIVE_DATE_KEY)
            if raw_date:
                last_active = date.fromisoformat(raw_date.decode("utf-8").strip())
        except Exception:
            logger.exception("Failed to load last active date from storage.")

        self._tasks = tasks
        self._last_active_date = last_active
        logger.info("TaskStore loaded total=%d last_active_date=%s", len(tasks), last_active)

        if seeded:
            self._save_tasks()
        self._notify()

    def _sample_tasks(self) -> tuple[Task, ...]:
        now = self._clock.now()
        return tuple(
            Task(
                id=self._new_id(),
                name=name,
                task_type=task_type,
                timing=timing,
                created_at=now,
                updated_at=now,
            )
            for name, task_type, timing in SAMPLE_TASKS
        )

    @staticmethod
    def _decode_tasks(raw: bytes) -> Iterable[Task]:
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"tasks record must be a JSON array, got {type(data).__name__}")

        seen: set[str] = set()
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                task = Task.from_record(item)
            except (TypeError, ValueError):
                logger.warning("Skipping malformed stored task: %r", item)
                continue
            if task is None or task.id in seen:
                continue
            seen.add(task.id)
            yield task

    # ---- persistence ----

    def _save_tasks(self) -> None:
        try:
            payload = json.dumps([t.to_record() for t in self._tasks], ensure_ascii=False)
            self._storage.set(TASKS_KEY, payload.encode("utf-8"))
        except Exception:
            logger.exception("Failed to persist tasks (count=%d).", len(self._tasks))

    def _save_last_active_date(self) -> None:
        if self._last_active_date is None:
            return
        try:
            self._storage.set(LAST_ACTIVE_DATE_KEY, self._last_active_date.isoformat().encode("utf-8"))
        except Exception:
            logger.exception("Failed to persist last active date %s.", self._last_active_date)

    # ---- change notification ----

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self._tasks
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Task listener %r failed.", listener)

    def _commit(self, tasks: tuple[Task, ...]) -> None:
        self._tasks = tasks
        self._save_tasks()
        self._notify()

    # ---- queries ----

    def list_tasks(self) -> tuple[Task, ...]:
        """All tasks, most recently added first."""
        return self._tasks

    def get_task(self, task_id: str) -> Task:
        for t in self._tasks:
            if t.id == task_id:
                return t
        raise NotFoundError(task_id)

    def count_tasks(self) -> int:
        return len(self._tasks)

    @property
    def last_active_date(self) -> date | None:
        return self._last_active_date

    def set_last_active_date(self, day: date) -> None:
        self._last_active_date = day
        self._save_last_active_date()
        logger.debug("Last active date set to %s", day)

    # ---- mutations ----

    def _replace_task(self, task_id: str, **changes: Any) -> Task:
        current = self.get_task(task_id)
        updated = replace(current, updated_at=self._clock.now(), **changes)
        self._commit(tuple(updated if t.id == task_id else t for t in self._tasks))
        return updated

    def add_task(self, name: str, task_type: str | TaskType, timing: str | TaskTiming) -> str:
        """Create a task (prepended) and return its id."""
        clean = clean_name(name)
        parsed_type = TaskType.parse(task_type)
        parsed_timing = TaskTiming.parse(timing)

        now = self._clock.now()
        task = Task(
            id=self._new_id(),
            name=clean,
            task_type=parsed_type,
            timing=parsed_timing,
            created_at=now,
            updated_at=now,
        )
        self._commit((task, *self._tasks))
        logger.debug(
            "Task added id=%s type=%s timing=%s weight=%s", task.id, task.task_type, task.timing, task.weight
        )
        return task.id

    def update_task(
        self,
        task_id: str,
        *,
        name: str | None = None,
        task_type: str | TaskType | None = None,
        timing: str | TaskTiming | None = None,
        completed: bool | None = None,
        today_selected: bool | None = None,
    ) -> Task:
        """Merge the given fields into the task; weight is recomputed, updated_at refreshed."""
        self.get_task(task_id)

        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = clean_name(name)
        if task_type is not None:
            changes["task_type"] = TaskType.parse(task_type)
        if timing is not None:
            changes["timing"] = TaskTiming.parse(timing)
        if completed is not None:
            changes["completed"] = bool(completed)
        if today_selected is not None:
            changes["today_selected"] = bool(today_selected)

        updated = self._replace_task(task_id, **changes)
        logger.debug("Task updated id=%s fields=%s weight=%s", task_id, sorted(changes), updated.weight)
        return updated

    def remove_task(self, task_id: str) -> None:
        self.get_task(task_id)
        self._commit(tuple(t for t in self._tasks if t.id != task_id))
        logger.debug("Task removed id=%s", task_id)

    def toggle_completed(self, task_id: str) -> Task:
        """
        Flip completed.

        complete -> incomplete also clears today_selected;
        incomplete -> complete leaves today_selected as it was.
        """
        current = self.get_task(task_id)
        was_completed = current.completed
        # Only reopening clears today_selected; completing keeps it (see DESIGN.md).
        updated = self._replace_task(
            task_id,
            completed=not was_completed,
            today_selected=False if was_completed else current.today_selected,
        )
        logger.debug("Task id=%s completed=%s", task_id, updated.completed)
        return updated

    def set_today_selected(self, task_id: str, selected: bool) -> Task:
        return self._replace_task(task_id, today_selected=bool(selected))

    def clear_today_selections(self) -> None:
        self._commit(tuple(replace(t, today_selected=False) if t.today_selected else t for t in self._tasks))
        logger.debug("Cleared today selections.")
