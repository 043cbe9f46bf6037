# src/taskmind/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (LLM/tasks/plan),
- loads persisted tasks and the last plan once.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..llm.offline import OfflineLLMClient
from ..tasks.local_storage import LocalStorage
from ..tasks.task_store import PlanStore, TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_llm_client(settings) -> LLMClient:
    try:
        return OpenRouterLLMClient(settings)
    except Exception as e:
        # Fallback for demos / local runs without external services.
        logger.warning("Using offline LLM client: %s", e)
        return OfflineLLMClient()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = LocalStorage(settings.storage_path)
    return AppState(
        settings=settings,
        llm=create_llm_client(settings),
        task_store=TaskStore(storage),
        plan_store=PlanStore(storage),
    )
