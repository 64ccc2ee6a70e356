# src/daily_focus/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.daily_flow import DailyFlow
from ..tasks.selection import DailySelectionEngine
from ..tasks.task_store import TaskStore
from .ports import KeyValueStorage


@dataclass
class AppState:
    # Settings-like object (Settings or a test namespace).
    settings: Any

    storage: KeyValueStorage
    store: TaskStore
    engine: DailySelectionEngine
    flow: DailyFlow
