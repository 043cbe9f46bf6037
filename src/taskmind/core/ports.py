# src/taskmind/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps LLM providers and storage swappable and makes testing easier.
"""

from collections.abc import Iterable
from typing import Any, Protocol


class LLMClient(Protocol):
    """Single-shot text completion client (OpenAI/OpenRouter-compatible)."""

    async def generate_text(self, prompt: str, *, model: str) -> str: ...


class TaskRepo(Protocol):
    def count_tasks(self) -> int: ...
    def list_tasks(self) -> list[Any]: ...
    def get_task(self, task_id: str) -> Any | None: ...
    def list_root_tasks(self) -> list[Any]: ...
    def subtasks_by_parent(self) -> dict[str, list[Any]]: ...
    def add_task(self, title: str) -> Any | None: ...
    def add_subtasks(self, parent_id: str, titles: Iterable[str]) -> list[Any]: ...
    def toggle_completed(self, task_id: str) -> Any | None: ...
    def delete_task(self, task_id: str) -> int: ...


class PlanRepo(Protocol):
    def get_plan(self) -> Any | None: ...
    def set_plan(self, text: str) -> Any | None: ...
    def clear_plan(self) -> None: ...
