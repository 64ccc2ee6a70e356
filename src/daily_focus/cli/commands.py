# src/daily_focus/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.errors import DailyFocusError, NotFoundError, ValidationError
from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Domain errors (bad input, unknown task) become the reply text.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except NotFoundError as e:
            # Stale reference from an old listing; nothing was changed.
            logger.warning("Command /%s: %s", name, e)
            return f"{e}. Use /list to refresh."
        except ValidationError as e:
            return str(e)
        except DailyFocusError as e:
            return f"Cannot do that now: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting / parsing helpers ----


def format_task(task: Task, number: int | None = None) -> str:
    mark = "x" if task.completed else " "
    today = " *today*" if task.today_selected and not task.completed else ""
    prefix = f"{number:>2}. " if number is not None else ""
    return (
        f"{prefix}[{mark}] {task.name} "
        f"({task.task_type} / {task.timing} / weight {task.weight}){today}"
    )


def resolve_task(state: AppState, ref: str) -> Task:
    """
    Resolve a task reference: 1-based row number in /list, or an id prefix.

    Raises NotFoundError if nothing (or more than one task) matches.
    """
    tasks = state.store.list_tasks()
    ref = ref.strip()

    if ref.isdigit():
        idx = int(ref) - 1
        if 0 <= idx < len(tasks):
            return tasks[idx]
        raise NotFoundError(ref)

    matches = [t for t in tasks if t.id.startswith(ref)] if ref else []
    if len(matches) != 1:
        raise NotFoundError(ref)
    return matches[0]


def _parse_edit_args(args: list[str]) -> dict[str, str]:
    """
    type=Need timing=Later name=Call the bank

    name= swallows the rest of the line so names may contain spaces.
    """
    fields: dict[str, str] = {}
    for i, arg in enumerate(args):
        key, sep, value = arg.partition("=")
        if not sep:
            raise ValidationError(f"Expected key=value, got {arg!r}.")
        key = key.lower()
        if key == "name":
            fields["name"] = " ".join([value, *args[i + 1 :]])
            break
        if key not in ("type", "timing"):
            raise ValidationError(f"Unknown field {key!r} (use type=, timing=, name=).")
        fields[key] = value
    return fields


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.store.list_tasks()
    open_count = sum(1 for t in tasks if not t.completed)
    last = state.store.last_active_date
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({open_count} open)\n"
        f"  On today's list: {len(state.engine.get_today_tasks())}\n"
        f"  Last active date: {last.isoformat() if last else 'never'}\n"
        f"  New day: {'yes' if state.engine.is_new_day() else 'no'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.store.list_tasks()
    if not tasks:
        return "No tasks yet. Add one with /add <type> <timing> <name>."
    lines = ["All tasks:"]
    for i, task in enumerate(tasks, start=1):
        lines.append(format_task(task, i))
    return "\n".join(lines)


def cmd_today(state: AppState, args: list[str]) -> str:
    today = state.engine.get_today_tasks()
    if not today:
        return "Nothing on today's list. Use /focus to pick today's tasks."
    lines = ["Today's focus:"]
    for task in today:
        lines.append(format_task(task))
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <type> <timing> <name...>
    """
    if len(args) < 3:
        return "Usage: /add <Want|Need|Both> <Today|Later> <name>"
    task_id = state.store.add_task(" ".join(args[2:]), args[0], args[1])
    return f"Added: {format_task(state.store.get_task(task_id))}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <ref> [type=..] [timing=..] [name=...]
    """
    if len(args) < 2:
        return "Usage: /edit <n> [type=Want|Need|Both] [timing=Today|Later] [name=...]"
    task = resolve_task(state, args[0])
    fields = _parse_edit_args(args[1:])
    updated = state.store.update_task(
        task.id,
        name=fields.get("name"),
        task_type=fields.get("type"),
        timing=fields.get("timing"),
    )
    return f"Updated: {format_task(updated)}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <n>"
    task = resolve_task(state, args[0])
    state.store.remove_task(task.id)
    return f'Removed "{task.name}".'


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <n>"
    task = resolve_task(state, args[0])
    updated = state.store.toggle_completed(task.id)
    verb = "Completed" if updated.completed else "Reopened"
    return f"{verb}: {format_task(updated)}"


def cmd_finish(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        for task in state.engine.get_today_tasks():
            with contextlib.suppress(Exception):
                emit(f"Done: {task.name}")
    n = state.engine.complete_day()
    if n == 0:
        return "Nothing open on today's list."
    return f"Great job! You have completed your tasks for today ({n})."


def cmd_focus(state: AppState, args: list[str]) -> str:
    state.flow.start_pass()
    n = state.flow.remaining
    if n == 0:
        return "No open tasks to choose from."
    return f"Pick your top tasks: {n} candidates."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task counts and the last active date.")
registry.register("list", cmd_list, help_text="List all tasks, newest first.", aliases=["ls"])
registry.register("today", cmd_today, help_text="Show today's list (runs the day-start prompts).")
registry.register("add", cmd_add, help_text="Add a task: /add <Want|Need|Both> <Today|Later> <name>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n> type=.. timing=.. name=...")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <n>.", aliases=["del"])
registry.register("done", cmd_done, help_text="Toggle a task's completion: /done <n>.")
registry.register("finish", cmd_finish, help_text="Mark everything on today's list as done.")
registry.register("focus", cmd_focus, help_text="Re-prioritise now: pick today's tasks one by one.")
