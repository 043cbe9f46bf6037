# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskmind.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TASKMIND_LLM_MODEL",
        "TASKMIND_TIME_ZONE",
        "TASKMIND_LOCALE",
        "TASKMIND_DATA_DIR",
        "TASKMIND_STORAGE_PATH",
        "TASKMIND_PORT",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.llm_model == "google/gemini-2.5-flash"
    assert s.time_zone == "UTC"
    assert s.locale == "en-US"
    assert s.storage_path == Path(".local/taskmind") / "storage.json"
    assert s.server_port == 8000


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKMIND_LLM_MODEL", "openai/gpt-4o-mini")
    monkeypatch.setenv("TASKMIND_TIME_ZONE", "Europe/Berlin")
    monkeypatch.setenv("TASKMIND_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKMIND_PORT", "not-a-number")
    monkeypatch.setenv("TASKMIND_CONSOLE_ENABLED", "no")
    monkeypatch.setenv("TASKMIND_OPENROUTER_API_KEY", "sk-x")

    s = Settings.from_env()

    assert s.llm_model == "openai/gpt-4o-mini"
    assert s.time_zone == "Europe/Berlin"
    assert s.storage_path == tmp_path / "storage.json"
    assert s.server_port == 8000
    assert s.console_enabled is False
    assert s.openrouter_api_key == "sk-x"
