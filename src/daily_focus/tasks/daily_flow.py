# src/daily_focus/tasks/daily_flow.py

"""
Day-start ritual as a UI-independent state machine.

    idle -> prompt_edit_tasks -> prompt_reprioritize -> reprioritizing -> idle
                                                     `-> rolled_over  -> idle

The host (console, GUI, ...) drives it: activate() when the daily view is shown,
answer the prompts, then feed one accept/defer decision per candidate.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.errors import FlowStateError, NotFoundError
from .selection import DailySelectionEngine
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class FlowState(StrEnum):
    IDLE = "idle"
    PROMPT_EDIT_TASKS = "prompt_edit_tasks"
    PROMPT_REPRIORITIZE = "prompt_reprioritize"
    REPRIORITIZING = "reprioritizing"
    ROLLED_OVER = "rolled_over"


class DailyFlow:
    def __init__(self, store: TaskStore, engine: DailySelectionEngine) -> None:
        self._store = store
        self._engine = engine

        self.state: FlowState = FlowState.IDLE
        # How the last finished ritual ended (reprioritizing or rolled_over).
        self.last_outcome: FlowState | None = None

        # User chose to edit tasks before answering the re-prioritise prompt.
        self.editing = False

        self._prompted = False
        self._candidates: list[Task] = []
        self._position = 0

    def _expect(self, *allowed: FlowState) -> None:
        if self.state not in allowed:
            raise FlowStateError(
                f"Not allowed in state {self.state.value} (expected {', '.join(s.value for s in allowed)})"
            )

    # ---- activation ----

    def activate(self) -> FlowState:
        """
        Daily view became visible.

        A ritual already in progress is resumed. Otherwise, on a new day, the
        edit-tasks prompt is entered, at most once per activation.
        """
        if self.state != FlowState.IDLE:
            return self.state

        if not self._prompted and self._engine.is_new_day():
            self._prompted = True
            self.state = FlowState.PROMPT_EDIT_TASKS
            logger.info("New day detected; starting day-start prompts.")
        return self.state

    def deactivate(self) -> None:
        """Daily view went away; the next activate() may prompt again."""
        self._prompted = False

    # ---- prompts ----

    def start_editing(self) -> None:
        """User wants to add or modify tasks first; the prompt stays pending."""
        self._expect(FlowState.PROMPT_EDIT_TASKS)
        self.editing = True

    def edit_tasks_done(self) -> FlowState:
        """User finished (or skipped) editing tasks."""
        self._expect(FlowState.PROMPT_EDIT_TASKS)
        self.editing = False
        self.state = FlowState.PROMPT_REPRIORITIZE
        return self.state

    def answer_reprioritize(self, yes: bool) -> FlowState:
        """
        yes -> clear selections and start a candidate pass;
        no  -> keep yesterday's open selections and mark today as handled.
        """
        self._expect(FlowState.PROMPT_REPRIORITIZE)
        if yes:
            self.start_pass()
            return self.state

        self._engine.update_last_active_date()
        self.last_outcome = FlowState.ROLLED_OVER
        self.state = FlowState.IDLE
        logger.info("Day rolled over without re-prioritising.")
        return FlowState.ROLLED_OVER

    # ---- candidate pass ----

    def start_pass(self) -> FlowState:
        """Clear today's selections and walk a fresh candidate snapshot."""
        self._expect(FlowState.IDLE, FlowState.PROMPT_REPRIORITIZE)
        self._store.clear_today_selections()
        self._candidates = self._engine.get_elimination_candidates()
        self._position = 0
        self.state = FlowState.REPRIORITIZING
        logger.info("Re-prioritising: %d candidates.", len(self._candidates))
        if not self._candidates:
            self._finish_pass()
        return self.state

    @property
    def candidates(self) -> list[Task]:
        return list(self._candidates)

    @property
    def current_candidate(self) -> Task | None:
        if self.state != FlowState.REPRIORITIZING or self._position >= len(self._candidates):
            return None
        return self._candidates[self._position]

    @property
    def remaining(self) -> int:
        if self.state != FlowState.REPRIORITIZING:
            return 0
        return len(self._candidates) - self._position

    def decide(self, accept: bool) -> Task | None:
        """Record accept/defer for the current candidate; return the next one (or None)."""
        self._expect(FlowState.REPRIORITIZING)
        task = self._candidates[self._position]
        try:
            self._store.set_today_selected(task.id, accept)
            logger.debug("Candidate %s %s", task.id, "accepted" if accept else "deferred")
        except NotFoundError:
            logger.warning("Candidate %s was deleted during the pass; skipping it.", task.id)

        self._position += 1
        if self._position >= len(self._candidates):
            self._finish_pass()
            return None
        return self._candidates[self._position]

    def _finish_pass(self) -> None:
        self._engine.update_last_active_date()
        self._candidates = []
        self._position = 0
        self.last_outcome = FlowState.REPRIORITIZING
        self.state = FlowState.IDLE
        logger.info("Re-prioritising finished.")
