# src/taskmind/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .ports import LLMClient, PlanRepo, TaskRepo


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    llm: LLMClient
    task_store: TaskRepo
    plan_store: PlanRepo

    # Task ids with a breakdown request in flight.
    loading_task_ids: set[str] = field(default_factory=set)
    is_planning: bool = False
