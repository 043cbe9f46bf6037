# src/taskmind/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, cast

from ..core import orchestrator
from ..core.state import AppState
from ..llm.client import friendly_llm_error_message

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /split, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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
        except Exception:
            nparams = 3

        result: CommandResult
        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _emit(emit: CommandEmitter | None, text: str) -> None:
    if emit:
        with contextlib.suppress(Exception):
            emit(text)


def resolve_task_ref(state: AppState, ref: str) -> Any | None:
    """
    Map a /list position to a task: "2" is the second top-level task,
    "2.1" is its first subtask.
    """
    head, _, tail = ref.strip().partition(".")
    try:
        root_idx = int(head) - 1
        sub_idx = int(tail) - 1 if tail else None
    except ValueError:
        return None

    roots = state.task_store.list_root_tasks()
    if not 0 <= root_idx < len(roots):
        return None
    root = roots[root_idx]
    if sub_idx is None:
        return root

    subs = state.task_store.subtasks_by_parent().get(root.id, [])
    if not 0 <= sub_idx < len(subs):
        return None
    return subs[sub_idx]


def format_task_list(state: AppState) -> str:
    roots = state.task_store.list_root_tasks()
    if not roots:
        return "No tasks yet. Add your first task with /add <title>."

    by_parent = state.task_store.subtasks_by_parent()
    lines: list[str] = []
    for i, task in enumerate(roots, start=1):
        mark = "x" if task.completed else " "
        badge = " [AI]" if task.ai_generated else ""
        busy = " (breaking down...)" if orchestrator.is_breaking_down(state, task.id) else ""
        lines.append(f"{i}. [{mark}] {task.title}{badge}{busy}")
        for j, sub in enumerate(by_parent.get(task.id, []), start=1):
            sub_mark = "x" if sub.completed else " "
            lines.append(f"   {i}.{j} [{sub_mark}] {sub.title}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help() + "\n  (plain text without a slash adds a task)"


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    plan = state.plan_store.get_plan()
    return (
        "Status:\n"
        f"  Model: {getattr(s, 'llm_model', '?')} ({state.llm.__class__.__name__})\n"
        f"  Time zone / locale: {getattr(s, 'time_zone', 'UTC')} / {getattr(s, 'locale', 'en-US')}\n"
        f"  Tasks: {state.task_store.count_tasks()}\n"
        f"  Plan: {'saved ' + plan.saved_at if plan else 'none'}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    task = orchestrator.add_task(state, " ".join(args))
    if task is None:
        return "Usage: /add <title>"
    return f"Added: {task.title}"


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_task_list(state)


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done 2      -> toggle task 2
    /done 2.1    -> toggle first subtask of task 2
    """
    if not args:
        return "Usage: /done <n> or /done <n.m>"
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task at position {args[0]}. Use /list."
    toggled = orchestrator.toggle_task(state, task.id)
    if toggled is None:
        return f"No task at position {args[0]}. Use /list."
    return f"{'Completed' if toggled.completed else 'Reopened'}: {toggled.title}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <n> or /rm <n.m>"
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task at position {args[0]}. Use /list."
    removed = orchestrator.delete_task(state, task.id)
    extra = f" (and {removed - 1} subtask(s))" if removed > 1 else ""
    return f"Deleted: {task.title}{extra}"


async def cmd_split(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /split 2     -> ask the model to break task 2 into subtasks
    """
    if not args:
        return "Usage: /split <n>"
    task = resolve_task_ref(state, args[0])
    if task is None:
        return f"No task at position {args[0]}. Use /list."

    _emit(emit, f"Breaking down: {task.title} ...")
    try:
        created = await orchestrator.break_down_task(state, task.id)
    except ValueError as e:
        return str(e)
    except orchestrator.BreakdownInProgressError:
        return "That task is already being broken down."
    except orchestrator.BreakdownError as e:
        cause = e.__cause__ if isinstance(e.__cause__, Exception) else e
        return f"Could not break down task: {friendly_llm_error_message(cause)}"

    if not created:
        return "The model returned no usable subtasks."
    lines = [f"Added {len(created)} subtask(s) to: {task.title}"]
    lines.extend(f"  - {sub.title}" for sub in created)
    return "\n".join(lines)


async def cmd_plan(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    _emit(emit, "Planning...")
    try:
        return await orchestrator.plan_day(state)
    except orchestrator.NoTasksError as e:
        return str(e)
    except orchestrator.PlanInProgressError as e:
        return str(e)


def cmd_showplan(state: AppState, args: list[str]) -> str:
    plan = state.plan_store.get_plan()
    if plan is None:
        return "No plan yet. Use /plan."
    return plan.text


def cmd_clearplan(state: AppState, args: list[str]) -> str:
    if state.plan_store.get_plan() is None:
        return "No plan to clear."
    orchestrator.clear_plan(state)
    return "Plan cleared."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show model, time context and counts.")
registry.register("add", cmd_add, help_text="Add a task: /add <title>.")
registry.register("list", cmd_list, help_text="List tasks with their subtasks.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <n> | /done <n.m>.")
registry.register("rm", cmd_rm, help_text="Delete a task (and its subtasks): /rm <n>.", aliases=["del"])
registry.register("split", cmd_split, help_text="Break a task into subtasks with AI: /split <n>.")
registry.register("plan", cmd_plan, help_text="Plan my day from pending tasks.")
registry.register("showplan", cmd_showplan, help_text="Show the saved plan.")
registry.register("clearplan", cmd_clearplan, help_text="Clear the saved plan.")
