# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from daily_focus.cli.bootstrap import create_initial_state
from daily_focus.core.state import AppState
from daily_focus.tasks.daily_flow import DailyFlow
from daily_focus.tasks.selection import DailySelectionEngine
from daily_focus.tasks.task_store import TaskStore

from .fakes import FakeClock, MemoryKeyValueStorage, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="daily-focus-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_path=tmp_path / "focus.sqlite3",
        log_dir=tmp_path,
        seed_sample_tasks=False,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture()
def store(storage: MemoryKeyValueStorage, clock: FakeClock, ids: SequentialIds) -> TaskStore:
    """Empty, loaded store backed by in-memory storage."""
    s = TaskStore(storage, clock=clock, id_generator=ids)
    s.load(seed_samples=False)
    return s


@pytest.fixture()
def engine(store: TaskStore, clock: FakeClock) -> DailySelectionEngine:
    return DailySelectionEngine(store, clock=clock)


@pytest.fixture()
def flow(store: TaskStore, engine: DailySelectionEngine) -> DailyFlow:
    return DailyFlow(store, engine)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    storage: MemoryKeyValueStorage,
    clock: FakeClock,
    ids: SequentialIds,
) -> AppState:
    """AppState wired through the real composition root, with fakes for I/O and time."""
    return create_initial_state(settings=settings, storage=storage, clock=clock, id_generator=ids)
