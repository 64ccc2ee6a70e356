# src/daily_focus/tasks/task_models.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..core.errors import ValidationError

logger = logging.getLogger(__name__)


class TaskType(StrEnum):
    """Why the task matters: something wanted, something needed, or both."""

    WANT = "Want"
    NEED = "Need"
    BOTH = "Both"

    @classmethod
    def parse(cls, raw: str | TaskType) -> TaskType:
        if isinstance(raw, cls):
            return raw
        key = str(raw or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValidationError(f"Unknown task type: {raw!r} (expected Want, Need or Both)")


class TaskTiming(StrEnum):
    TODAY = "Today"
    LATER = "Later"

    @classmethod
    def parse(cls, raw: str | TaskTiming) -> TaskTiming:
        if isinstance(raw, cls):
            return raw
        key = str(raw or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValidationError(f"Unknown task timing: {raw!r} (expected Today or Later)")


TYPE_WEIGHTS: dict[str, int] = {
    TaskType.WANT: 1,
    TaskType.NEED: 2,
    TaskType.BOTH: 3,
}

TIMING_WEIGHTS: dict[str, int] = {
    TaskTiming.TODAY: 2,
    TaskTiming.LATER: 1,
}


def compute_weight(task_type: str, timing: str) -> int:
    # Unrecognized values weigh 1.
    return TYPE_WEIGHTS.get(task_type, 1) * TIMING_WEIGHTS.get(timing, 1)


def clean_name(raw: str | None) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationError("Please enter a task name.")
    return name


def _stored_flag(raw: Mapping[str, Any], key: str, task_id: Any) -> bool:
    value = raw.get(key, False)
    if isinstance(value, bool):
        return value
    logger.warning("Stored task %s has non-boolean %s=%r; using false.", task_id, key, value)
    return False


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    name: str
    # A plain str only when loaded from a record with a value we do not know.
    task_type: TaskType | str
    timing: TaskTiming | str

    created_at: float
    updated_at: float

    completed: bool = False
    today_selected: bool = False

    # Derived from task_type/timing; never passed in.
    weight: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "weight", compute_weight(self.task_type, self.timing))

    def to_record(self) -> dict[str, Any]:
        """Persisted mapping (camelCase keys, weight stored but not trusted on load)."""
        return {
            "id": self.id,
            "name": self.name,
            "type": str(self.task_type),
            "timing": str(self.timing),
            "weight": self.weight,
            "completed": self.completed,
            "todaySelected": self.today_selected,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, raw: Mapping[str, Any]) -> Task | None:
        """
        Rebuild a task from a persisted mapping.

        The stored weight is ignored and recomputed. Unknown type/timing strings are
        kept verbatim (they weigh 1) so saving the task again writes them back unchanged.
        Returns None for records that cannot be a task.
        """
        task_id = raw.get("id")
        name = str(raw.get("name") or "").strip()
        if not task_id or not name:
            logger.warning("Skipping stored task without id/name: %r", raw)
            return None

        raw_type = str(raw.get("type") or "")
        try:
            task_type: TaskType | str = TaskType.parse(raw_type)
        except ValidationError:
            logger.warning("Stored task %s has unknown type %r; it weighs 1.", task_id, raw_type)
            task_type = raw_type

        raw_timing = str(raw.get("timing") or "")
        try:
            timing: TaskTiming | str = TaskTiming.parse(raw_timing)
        except ValidationError:
            logger.warning("Stored task %s has unknown timing %r; it weighs 1.", task_id, raw_timing)
            timing = raw_timing

        created_at = float(raw.get("createdAt") or 0.0)
        return cls(
            id=str(task_id),
            name=name,
            task_type=task_type,
            timing=timing,
            created_at=created_at,
            updated_at=float(raw.get("updatedAt") or created_at),
            completed=_stored_flag(raw, "completed", task_id),
            today_selected=_stored_flag(raw, "todaySelected", task_id),
        )
