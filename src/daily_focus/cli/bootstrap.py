# src/daily_focus/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage, clock and id generator into the task store, engine and flow.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.clock import SystemClock, uuid_id_generator
from ..core.ports import Clock, IdGenerator, KeyValueStorage
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStorage
from ..tasks.daily_flow import DailyFlow
from ..tasks.selection import DailySelectionEngine
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    clock: Clock | None = None,
    id_generator: IdGenerator | None = None,
) -> AppState:
    """
    Create AppState and load the task store.

    Keeping settings and collaborators injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = SqliteKeyValueStorage(settings.storage_path)

    clock = clock or SystemClock()
    store = TaskStore(storage, clock=clock, id_generator=id_generator or uuid_id_generator)
    store.load(seed_samples=bool(getattr(settings, "seed_sample_tasks", True)))

    engine = DailySelectionEngine(store, clock=clock)
    flow = DailyFlow(store, engine)

    logger.info(
        "State ready tasks=%d last_active_date=%s", store.count_tasks(), store.last_active_date
    )
    return AppState(settings=settings, storage=storage, store=store, engine=engine, flow=flow)
