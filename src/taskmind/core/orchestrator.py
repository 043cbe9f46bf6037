# src/taskmind/core/orchestrator.py

"""
Task-manager flows: plain task edits, AI breakdown and day planning.

Transport-agnostic: the console connector calls these directly, the HTTP API reuses
the same planning helpers.

Breakdown: idle -> requesting -> extracting -> applying -> idle (or failed -> idle).
Loading state is tracked per task id, so different tasks can be broken down at the
same time while the same task cannot have two requests in flight.

Planning: idle -> planning -> idle, one at a time. A failed plan request replaces
the plan with a fixed retry message instead of raising.

Nothing here retries or cancels; each failure ends that request.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..planning.breakdown import generate_subtasks
from ..planning.day_plan import PLAN_ERROR_TEXT, generate_plan
from .state import AppState

logger = logging.getLogger(__name__)


class BreakdownError(RuntimeError):
    """The model call for a breakdown failed; nothing was added."""


class BreakdownInProgressError(RuntimeError):
    """A breakdown for this task is already running."""


class PlanInProgressError(RuntimeError):
    """A plan request is already running."""


class NoTasksError(ValueError):
    """Planning needs at least one task."""


def _model(state: AppState) -> str:
    return str(getattr(state.settings, "llm_model", "") or "google/gemini-2.5-flash")


# ---- plain task edits ----


def add_task(state: AppState, title: str) -> Any | None:
    return state.task_store.add_task(title)


def toggle_task(state: AppState, task_id: str) -> Any | None:
    return state.task_store.toggle_completed(task_id)


def delete_task(state: AppState, task_id: str) -> int:
    return state.task_store.delete_task(task_id)


# ---- breakdown ----


def is_breaking_down(state: AppState, task_id: str) -> bool:
    return task_id in state.loading_task_ids


async def break_down_task(state: AppState, task_id: str) -> list[Any]:
    """
    Split a root task into AI-generated subtasks and insert them as one batch.

    Returns the created subtasks (possibly empty).
    Raises:
        KeyError: unknown task id.
        ValueError: the task is itself a subtask.
        BreakdownInProgressError: a breakdown for this task is already running.
        BreakdownError: the model call failed.
    """
    task = state.task_store.get_task(task_id)
    if task is None:
        raise KeyError(task_id)
    if getattr(task, "parent_id", None):
        raise ValueError("Only top-level tasks can be broken down.")
    if task_id in state.loading_task_ids:
        raise BreakdownInProgressError(f"Breakdown already running for task {task_id}")

    state.loading_task_ids.add(task_id)
    try:
        logger.info("Breakdown requested task_id=%s", task_id)
        try:
            titles = await generate_subtasks(state.llm, task.title, model=_model(state))
        except Exception as e:
            logger.exception("Breakdown failed task_id=%s", task_id)
            raise BreakdownError("Failed to break down task") from e

        # The source task may have been deleted while we were waiting on the model.
        if state.task_store.get_task(task_id) is None:
            logger.info("Breakdown result dropped: task_id=%s no longer exists", task_id)
            return []

        created = state.task_store.add_subtasks(task_id, titles)
        logger.info("Breakdown applied task_id=%s subtasks=%d", task_id, len(created))
        return created
    finally:
        state.loading_task_ids.discard(task_id)


# ---- day plan ----


async def plan_day(state: AppState, *, now: datetime | None = None) -> str:
    """
    Generate a plan for all pending tasks and store it (replacing the old one).

    Returns the stored text: the model output, or PLAN_ERROR_TEXT on failure.
    Raises:
        PlanInProgressError: another plan request is running.
        NoTasksError: the task list is empty.
    """
    if state.is_planning:
        raise PlanInProgressError("A plan is already being generated.")
    if state.task_store.count_tasks() == 0:
        raise NoTasksError("Add at least one task before planning.")

    state.is_planning = True
    try:
        try:
            text = await generate_plan(
                state.llm,
                state.task_store.list_tasks(),
                model=_model(state),
                now=now,
                time_zone=getattr(state.settings, "time_zone", None),
                locale=getattr(state.settings, "locale", None),
            )
        except Exception:
            logger.exception("Plan generation failed")
            text = PLAN_ERROR_TEXT

        state.plan_store.set_plan(text)
        return text
    finally:
        state.is_planning = False


def clear_plan(state: AppState) -> None:
    state.plan_store.clear_plan()
