# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmind.core.state import AppState
from taskmind.tasks.local_storage import LocalStorage
from taskmind.tasks.task_store import PlanStore, TaskStore

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskmind-test",
        llm_model="test/model",
        time_zone="UTC",
        locale="en-US",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
    )


@pytest.fixture()
def storage(settings: SimpleNamespace) -> LocalStorage:
    return LocalStorage(settings.storage_path)


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture()
def state(settings: SimpleNamespace, storage: LocalStorage, llm: FakeLLMClient) -> AppState:
    """
    AppState wired with a deterministic fake LLM.

    NOTE: We keep real stores on a tmp JSON file because their persistence
    behaviour is part of what we want to test.
    """
    return AppState(
        settings=settings,
        llm=llm,
        task_store=TaskStore(storage),
        plan_store=PlanStore(storage),
    )
