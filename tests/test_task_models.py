# tests/test_task_models.py

from __future__ import annotations

from dataclasses import replace

import pytest

from daily_focus.core.errors import ValidationError
from daily_focus.tasks.task_models import Task, TaskTiming, TaskType, compute_weight


@pytest.mark.parametrize(
    ("task_type", "timing", "expected"),
    [
        (TaskType.WANT, TaskTiming.TODAY, 2),
        (TaskType.WANT, TaskTiming.LATER, 1),
        (TaskType.NEED, TaskTiming.TODAY, 4),
        (TaskType.NEED, TaskTiming.LATER, 2),
        (TaskType.BOTH, TaskTiming.TODAY, 6),
        (TaskType.BOTH, TaskTiming.LATER, 3),
    ],
)
def test_weight_is_type_weight_times_timing_weight(task_type, timing, expected) -> None:
    assert compute_weight(task_type, timing) == expected
    task = Task(id="a", name="x", task_type=task_type, timing=timing, created_at=0.0, updated_at=0.0)
    assert task.weight == expected


def test_unrecognized_values_weigh_one() -> None:
    assert compute_weight("Someday", "Today") == 2
    assert compute_weight("Need", "Someday") == 2
    assert compute_weight("", "") == 1


def test_weight_follows_replace() -> None:
    task = Task(id="a", name="x", task_type=TaskType.WANT, timing=TaskTiming.LATER, created_at=0.0, updated_at=0.0)
    assert replace(task, task_type=TaskType.BOTH, timing=TaskTiming.TODAY).weight == 6


def test_parse_is_case_insensitive_and_rejects_unknown() -> None:
    assert TaskType.parse("need") is TaskType.NEED
    assert TaskType.parse(" BOTH ") is TaskType.BOTH
    assert TaskTiming.parse("later") is TaskTiming.LATER

    with pytest.raises(ValidationError):
        TaskType.parse("Maybe")
    with pytest.raises(ValidationError):
        TaskTiming.parse("Tomorrow")


def test_from_record_recomputes_stale_weight_and_keeps_other_fields() -> None:
    raw = {
        "id": "abc",
        "name": "Pay bills",
        "type": "Need",
        "timing": "Today",
        "weight": 99,
        "completed": True,
        "todaySelected": True,
        "createdAt": 10.0,
        "updatedAt": 20.0,
    }
    task = Task.from_record(raw)

    assert task is not None
    assert task.weight == 4
    assert (task.id, task.name, task.completed, task.today_selected) == ("abc", "Pay bills", True, True)
    assert (task.created_at, task.updated_at) == (10.0, 20.0)


def test_from_record_keeps_unknown_type_and_timing_verbatim() -> None:
    task = Task.from_record({"id": "z", "name": "Odd", "type": "Maybe", "timing": "Someday"})

    assert task is not None
    assert (task.task_type, task.timing) == ("Maybe", "Someday")
    assert task.weight == 1
    assert task.completed is False
    assert task.today_selected is False
    assert (task.to_record()["type"], task.to_record()["timing"]) == ("Maybe", "Someday")


def test_from_record_only_accepts_real_booleans() -> None:
    task = Task.from_record(
        {"id": "b", "name": "Flags", "type": "Need", "timing": "Today", "completed": "false", "todaySelected": 1}
    )

    assert task is not None
    assert task.completed is False
    assert task.today_selected is False


def test_from_record_skips_records_without_id_or_name() -> None:
    assert Task.from_record({"name": "no id", "type": "Want", "timing": "Later"}) is None
    assert Task.from_record({"id": "x", "name": "   ", "type": "Want", "timing": "Later"}) is None


def test_to_record_uses_persisted_key_names() -> None:
    task = Task(id="a", name="Exercise", task_type=TaskType.BOTH, timing=TaskTiming.TODAY, created_at=1.0, updated_at=2.0)
    record = task.to_record()

    assert record == {
        "id": "a",
        "name": "Exercise",
        "type": "Both",
        "timing": "Today",
        "weight": 6,
        "completed": False,
        "todaySelected": False,
        "createdAt": 1.0,
        "updatedAt": 2.0,
    }
