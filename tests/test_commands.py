# tests/test_commands.py

from __future__ import annotations

import pytest

from taskmind.cli.commands import CommandRegistry, registry, resolve_task_ref
from taskmind.core.state import AppState
from taskmind.planning.day_plan import PLAN_ERROR_TEXT

from .fakes import FakeLLMClient


@pytest.mark.asyncio
async def test_command_registry_routes_sync_async_and_emit(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    emitted: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3 " + " ".join(args)

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/b y z", emit=emitted.append) == "h3 y z"
    assert await reg.handle(state, "/BEE") == "h3 "
    assert called == {"h2": 1, "h3": 2}
    assert emitted == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_add_list_done_rm(state: AppState) -> None:
    assert await registry.handle(state, "/add   Buy milk ") == "Added: Buy milk"
    assert await registry.handle(state, "/add") == "Usage: /add <title>"
    await registry.handle(state, "/add Call bank")

    listing = await registry.handle(state, "/list")
    assert listing == "1. [ ] Call bank\n2. [ ] Buy milk"

    assert await registry.handle(state, "/done 2") == "Completed: Buy milk"
    assert "2. [x] Buy milk" in (await registry.handle(state, "/list") or "")
    assert await registry.handle(state, "/done 2") == "Reopened: Buy milk"
    assert "No task at position 9" in (await registry.handle(state, "/done 9") or "")

    assert await registry.handle(state, "/rm 1") == "Deleted: Call bank"
    assert state.task_store.count_tasks() == 1


@pytest.mark.asyncio
async def test_split_adds_subtasks_and_lists_them(state: AppState, llm: FakeLLMClient) -> None:
    await registry.handle(state, "/add Move house")
    llm.next_text = '{"subtasks": ["Pack", "Book van"]}'
    notes: list[str] = []

    reply = await registry.handle(state, "/split 1", emit=notes.append)

    assert reply == "Added 2 subtask(s) to: Move house\n  - Pack\n  - Book van"
    assert notes and "Breaking down" in notes[0]
    assert await registry.handle(state, "/list") == (
        "1. [ ] Move house\n   1.1 [ ] Pack\n   1.2 [ ] Book van"
    )

    sub = resolve_task_ref(state, "1.2")
    assert sub is not None and sub.title == "Book van"
    assert resolve_task_ref(state, "1.3") is None
    assert resolve_task_ref(state, "x") is None

    assert "Only top-level tasks" in (await registry.handle(state, "/split 1.1") or "")
    assert "(and 2 subtask(s))" in (await registry.handle(state, "/rm 1") or "")


@pytest.mark.asyncio
async def test_split_failure_reports_message(state: AppState, llm: FakeLLMClient) -> None:
    await registry.handle(state, "/add Taxes")
    llm.error = RuntimeError("LLM is rate-limited. Try again later.")

    reply = await registry.handle(state, "/split 1")

    assert reply == "Could not break down task: LLM is rate-limited. Try again later."
    assert state.task_store.count_tasks() == 1


@pytest.mark.asyncio
async def test_plan_show_and_clear(state: AppState, llm: FakeLLMClient) -> None:
    assert "at least one task" in (await registry.handle(state, "/plan") or "")

    await registry.handle(state, "/add Write docs")
    llm.next_text = "# Today's Plan"
    assert await registry.handle(state, "/plan") == "# Today's Plan"
    assert await registry.handle(state, "/showplan") == "# Today's Plan"

    assert await registry.handle(state, "/clearplan") == "Plan cleared."
    assert await registry.handle(state, "/showplan") == "No plan yet. Use /plan."
    assert await registry.handle(state, "/clearplan") == "No plan to clear."

    llm.error = RuntimeError("down")
    assert await registry.handle(state, "/plan") == PLAN_ERROR_TEXT


@pytest.mark.asyncio
async def test_help_and_status(state: AppState) -> None:
    help_text = await registry.handle(state, "/help") or ""
    assert "/split" in help_text and "/plan" in help_text

    status = await registry.handle(state, "/status") or ""
    assert "test/model" in status
    assert "Tasks: 0" in status
