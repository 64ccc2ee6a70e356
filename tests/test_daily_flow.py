# tests/test_daily_flow.py

from __future__ import annotations

import pytest

from daily_focus.core.errors import FlowStateError
from daily_focus.tasks.daily_flow import DailyFlow, FlowState
from daily_focus.tasks.selection import DailySelectionEngine
from daily_focus.tasks.task_store import TaskStore

from .fakes import FakeClock


def _seed(store: TaskStore) -> dict[str, str]:
    return {
        "read": store.add_task("Read a book", "Want", "Later"),
        "bills": store.add_task("Pay bills", "Need", "Today"),
        "exercise": store.add_task("Exercise", "Both", "Today"),
    }


def test_no_prompt_when_day_already_handled(flow: DailyFlow, engine: DailySelectionEngine) -> None:
    engine.update_last_active_date()
    assert flow.activate() == FlowState.IDLE


def test_prompt_fires_once_per_activation(flow: DailyFlow) -> None:
    assert flow.activate() == FlowState.PROMPT_EDIT_TASKS
    flow.edit_tasks_done()

    # Activating again resumes where the ritual is, it does not restart the prompts.
    assert flow.activate() == FlowState.PROMPT_REPRIORITIZE
    assert flow.state == FlowState.PROMPT_REPRIORITIZE


def test_pending_prompt_is_resumed(flow: DailyFlow) -> None:
    flow.activate()
    flow.deactivate()
    assert flow.activate() == FlowState.PROMPT_EDIT_TASKS


def test_reprioritize_walks_candidates_and_records_decisions(
    store: TaskStore, engine: DailySelectionEngine, flow: DailyFlow
) -> None:
    ids = _seed(store)
    store.set_today_selected(ids["read"], True)  # yesterday's pick

    flow.activate()
    flow.edit_tasks_done()
    assert flow.answer_reprioritize(True) == FlowState.REPRIORITIZING
    # Previous selections cleared before the pass.
    assert not store.get_task(ids["read"]).today_selected

    assert [t.name for t in flow.candidates] == ["Exercise", "Pay bills", "Read a book"]
    assert flow.current_candidate.id == ids["exercise"]
    assert flow.remaining == 3

    nxt = flow.decide(True)
    assert nxt is not None and nxt.id == ids["bills"]
    flow.decide(False)
    assert engine.is_new_day() is True

    assert flow.decide(True) is None
    assert flow.state == FlowState.IDLE
    assert flow.last_outcome == FlowState.REPRIORITIZING
    assert engine.is_new_day() is False

    assert store.get_task(ids["exercise"]).today_selected is True
    assert store.get_task(ids["bills"]).today_selected is False
    assert store.get_task(ids["read"]).today_selected is True


def test_declining_rolls_over_yesterdays_selection(
    store: TaskStore, engine: DailySelectionEngine, flow: DailyFlow
) -> None:
    ids = _seed(store)
    store.set_today_selected(ids["bills"], True)

    flow.activate()
    flow.edit_tasks_done()
    assert flow.answer_reprioritize(False) == FlowState.ROLLED_OVER

    assert flow.state == FlowState.IDLE
    assert flow.last_outcome == FlowState.ROLLED_OVER
    assert engine.is_new_day() is False
    assert [t.id for t in engine.get_today_tasks()] == [ids["bills"]]


def test_empty_candidate_list_finishes_immediately(engine: DailySelectionEngine, flow: DailyFlow) -> None:
    flow.activate()
    flow.edit_tasks_done()

    assert flow.answer_reprioritize(True) == FlowState.IDLE
    assert flow.current_candidate is None
    assert engine.is_new_day() is False


def test_pass_is_a_snapshot(store: TaskStore, flow: DailyFlow) -> None:
    _seed(store)
    flow.start_pass()
    store.add_task("Late addition", "Both", "Today")

    assert flow.remaining == 3
    assert "Late addition" not in [t.name for t in flow.candidates]


def test_candidate_deleted_mid_pass_is_skipped(
    store: TaskStore, engine: DailySelectionEngine, flow: DailyFlow
) -> None:
    ids = _seed(store)
    flow.start_pass()
    store.remove_task(ids["exercise"])

    nxt = flow.decide(True)
    assert nxt is not None and nxt.id == ids["bills"]
    assert flow.remaining == 2

    flow.decide(True)
    assert flow.decide(False) is None
    assert flow.state == FlowState.IDLE
    assert engine.is_new_day() is False
    assert [t.name for t in engine.get_today_tasks()] == ["Pay bills"]


def test_next_day_prompts_again(flow: DailyFlow, clock: FakeClock) -> None:
    flow.activate()
    flow.edit_tasks_done()
    flow.answer_reprioritize(False)
    flow.deactivate()
    assert flow.activate() == FlowState.IDLE

    clock.advance_days(1)
    flow.deactivate()
    assert flow.activate() == FlowState.PROMPT_EDIT_TASKS


def test_wrong_state_operations_raise(flow: DailyFlow) -> None:
    with pytest.raises(FlowStateError):
        flow.edit_tasks_done()
    with pytest.raises(FlowStateError):
        flow.answer_reprioritize(True)
    with pytest.raises(FlowStateError):
        flow.decide(True)

    flow.activate()
    with pytest.raises(FlowStateError):
        flow.start_pass()


def test_editing_keeps_prompt_pending_until_done(store: TaskStore, flow: DailyFlow) -> None:
    flow.activate()
    flow.start_editing()
    store.add_task("Added while editing", "Need", "Today")

    flow.deactivate()
    assert flow.activate() == FlowState.PROMPT_EDIT_TASKS
    assert flow.editing is True

    assert flow.edit_tasks_done() == FlowState.PROMPT_REPRIORITIZE
    assert flow.editing is False
    flow.answer_reprioritize(True)
    assert [t.name for t in flow.candidates] == ["Added while editing"]
