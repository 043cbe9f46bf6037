# src/taskmind/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .local_storage import LocalStorage
from .task_models import Plan, Task, new_task_id, utc_now_iso

logger = logging.getLogger(__name__)

TASKS_STORAGE_KEY = "taskmind:tasks"
PLAN_STORAGE_KEY = "taskmind:plan"


class TaskStore:
    """
    Flat task collection with parent references.

    - All tasks live in one list, newest first; parent -> children views are derived.
    - Every mutation builds a new list and swaps it in whole, then writes through
      to storage (best-effort).
    - Loaded once from storage on construction.
    """

    def __init__(self, storage: LocalStorage | None = None) -> None:
        self._storage = storage
        self._tasks: list[Task] = self._load()
        logger.info(
            "TaskStore ready storage=%s total=%s",
            storage.path if storage is not None else None,
            len(self._tasks),
        )

    # ---- low-level helpers ----

    def _load(self) -> list[Task]:
        if self._storage is None:
            return []
        raw = self._storage.get_item(TASKS_STORAGE_KEY)
        if not isinstance(raw, list):
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for item in raw:
            if not isinstance(item, dict):
                continue
            task = Task.from_dict(item)
            if not task.title or task.id in seen:
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def _replace(self, tasks: list[Task]) -> None:
        self._tasks = tasks
        if self._storage is not None:
            self._storage.set_item(TASKS_STORAGE_KEY, [t.to_dict() for t in tasks])

    # ---- queries ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def list_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def list_root_tasks(self) -> list[Task]:
        return [t for t in self._tasks if t.is_root]

    def subtasks_by_parent(self) -> dict[str, list[Task]]:
        out: dict[str, list[Task]] = {}
        for t in self._tasks:
            if not t.parent_id:
                continue
            out.setdefault(t.parent_id, []).append(t)
        return out

    def list_subtasks(self, parent_id: str) -> list[Task]:
        return [t for t in self._tasks if t.parent_id == parent_id]

    def list_pending_tasks(self) -> list[Task]:
        return [t for t in self._tasks if not t.completed]

    # ---- mutations ----

    def add_task(self, title: str) -> Task | None:
        """Add a root task. Blank titles are ignored (returns None)."""
        clean = (title or "").strip()
        if not clean:
            return None

        task = Task(id=new_task_id(), title=clean, completed=False, created_at=utc_now_iso())
        self._replace([task, *self._tasks])
        logger.debug("Task added id=%s", task.id)
        return task

    def add_subtasks(self, parent_id: str, titles: Iterable[str]) -> list[Task]:
        """
        Insert AI-generated subtasks for `parent_id` as one batch (front of the list,
        extraction order kept). Blank titles are dropped; an empty batch is a no-op.
        """
        now = utc_now_iso()
        batch = [
            Task(
                id=new_task_id(),
                title=clean,
                completed=False,
                created_at=now,
                parent_id=parent_id,
                ai_generated=True,
            )
            for clean in ((title or "").strip() for title in titles)
            if clean
        ]
        if not batch:
            return []

        self._replace([*batch, *self._tasks])
        logger.debug("Subtasks added parent=%s count=%d", parent_id, len(batch))
        return batch

    def toggle_completed(self, task_id: str) -> Task | None:
        toggled: Task | None = None
        out: list[Task] = []
        for t in self._tasks:
            if t.id == task_id:
                toggled = Task(
                    id=t.id,
                    title=t.title,
                    completed=not t.completed,
                    created_at=t.created_at,
                    parent_id=t.parent_id,
                    ai_generated=t.ai_generated,
                    estimated_minutes=t.estimated_minutes,
                )
                out.append(toggled)
            else:
                out.append(t)

        if toggled is None:
            return None
        self._replace(out)
        return toggled

    def delete_task(self, task_id: str) -> int:
        """Delete a task and its direct children. Returns how many records were removed."""
        kept = [t for t in self._tasks if t.id != task_id and t.parent_id != task_id]
        removed = len(self._tasks) - len(kept)
        if removed:
            self._replace(kept)
            logger.debug("Task deleted id=%s removed=%d", task_id, removed)
        return removed


class PlanStore:
    """Holds the single day-plan artifact; replaced wholesale, persisted best-effort."""

    def __init__(self, storage: LocalStorage | None = None) -> None:
        self._storage = storage
        self._plan: Plan | None = self._load()

    def _load(self) -> Plan | None:
        if self._storage is None:
            return None
        raw = self._storage.get_item(PLAN_STORAGE_KEY)
        if not isinstance(raw, dict):
            return None
        return Plan.from_dict(raw)

    def get_plan(self) -> Plan | None:
        return self._plan

    def set_plan(self, text: str) -> Plan | None:
        if not text:
            self.clear_plan()
            return None

        plan = Plan(text=text, saved_at=utc_now_iso())
        self._plan = plan
        if self._storage is not None:
            self._storage.set_item(PLAN_STORAGE_KEY, plan.to_dict())
        return plan

    def clear_plan(self) -> None:
        self._plan = None
        if self._storage is not None:
            self._storage.remove_item(PLAN_STORAGE_KEY)
