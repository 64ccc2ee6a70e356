# src/daily_focus/core/clock.py

from __future__ import annotations

import time
import uuid
from datetime import date


class SystemClock:
    """Wall clock; today() is the calendar date in the local timezone."""

    def now(self) -> float:
        return time.time()

    def today(self) -> date:
        return date.today()


def uuid_id_generator() -> str:
    return uuid.uuid4().hex
