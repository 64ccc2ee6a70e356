# src/daily_focus/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import format_task
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.daily_flow import FlowState

logger = logging.getLogger(__name__)

YES = {"y", "yes"}
NO = {"n", "no", ""}
ACCEPT = {"y", "yes", "k", "keep", ">"}
DEFER = {"n", "no", "d", "defer", "<"}


class _ConsoleClosed(Exception):
    """stdin closed or interrupted while waiting for an answer."""


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _ask(prompt: str) -> str:
    try:
        return input(prompt).strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        raise _ConsoleClosed() from None


def _ask_yes_no(prompt: str) -> bool:
    while True:
        answer = _ask(f"{prompt} [y/N] ")
        if answer in YES:
            return True
        if answer in NO:
            return False
        print("Please answer y or n.")


def _walk_candidates(state: AppState) -> None:
    flow = state.flow
    print("Pick your top tasks: y = take on today, n = defer.")
    while flow.state == FlowState.REPRIORITIZING:
        task = flow.current_candidate
        if task is None:
            break
        answer = _ask(f"({flow.remaining} left) {format_task(task)} - keep for today? [y/n] ")
        if answer in ACCEPT:
            flow.decide(True)
        elif answer in DEFER:
            flow.decide(False)
        else:
            print("Please answer y (keep) or n (defer).")
    print("All done!")


def drive_daily_flow(state: AppState) -> None:
    """
    Run whatever part of the day-start ritual is pending.

    When the user wants to edit first, the flow stays in prompt_edit_tasks;
    the next /today goes straight on to the re-prioritise question.
    """
    flow = state.flow

    if flow.state == FlowState.PROMPT_EDIT_TASKS and not flow.editing:
        _print_ts("New day, new focus.")
        if _ask_yes_no("Add or modify any tasks?"):
            flow.start_editing()
            print("Edit with /add, /edit, /rm, /done. Use /today when you are ready.")
            return

    if flow.state == FlowState.PROMPT_EDIT_TASKS:
        flow.edit_tasks_done()

    if flow.state == FlowState.PROMPT_REPRIORITIZE:
        if flow.answer_reprioritize(_ask_yes_no("Re-prioritise today's focus?")) == FlowState.ROLLED_OVER:
            print("Keeping yesterday's unfinished tasks on today's list.")
            return

    if flow.state == FlowState.REPRIORITIZING:
        _walk_candidates(state)


def show_daily_view(state: AppState) -> None:
    """One activation of the daily view: prompt (at most once) and run the ritual."""
    state.flow.deactivate()
    state.flow.activate()
    drive_daily_flow(state)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "daily-focus"))
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    try:
        show_daily_view(state)
        print(command_registry.handle(state, "/today"))

        while True:
            try:
                user_input = input(">>> ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                print("Commands start with /. Use /help to list them.")
                continue

            if user_input.lower().split()[0] == "/today":
                show_daily_view(state)

            try:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is not None:
                print(cmd_response)

            # /focus starts a pass; walk it right away.
            if state.flow.state == FlowState.REPRIORITIZING:
                _walk_candidates(state)
    except _ConsoleClosed:
        logger.info("Console closed during a prompt, exiting.")

    logger.info("Console connector finished.")
