# tests/test_api.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from taskmind.api.server import create_app
from taskmind.core.state import AppState

from .fakes import FakeLLMClient


@pytest.fixture()
def client(state: AppState) -> TestClient:
    return TestClient(create_app(state))


def test_health(client: TestClient) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert res.json()["llm_client"] == "FakeLLMClient"


def test_breakdown_returns_extracted_subtasks(client: TestClient, llm: FakeLLMClient) -> None:
    llm.next_text = '```json\n{"subtasks": ["Research", "Draft", "Review"]}\n```'

    res = client.post("/breakdown", json={"title": "Write blog post"})

    assert res.status_code == 200
    assert res.json() == {"subtasks": ["Research", "Draft", "Review"]}
    assert 'Task: "Write blog post"' in llm.last_prompt


def test_breakdown_garbage_output_is_still_valid_json(client: TestClient, llm: FakeLLMClient) -> None:
    llm.next_text = "Sure!\n1. One\n2. Two\n3. Three\n4. Four\n5. Five\n6. Six\n7. Seven"

    res = client.post("/breakdown", json={"title": "x"})

    assert res.status_code == 200
    assert res.json()["subtasks"] == ["Sure!", "One", "Two", "Three", "Four"]


@pytest.mark.parametrize("body", [{}, {"title": ""}, {"title": "   "}, {"title": 42}, ["title"]])
def test_breakdown_rejects_bad_title(client: TestClient, llm: FakeLLMClient, body) -> None:
    res = client.post("/breakdown", json=body)

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid 'title' provided"}
    assert llm.calls == []


def test_breakdown_provider_error_is_500(client: TestClient, llm: FakeLLMClient) -> None:
    llm.error = RuntimeError("LLM is rate-limited. Try again later.")

    res = client.post("/breakdown", json={"title": "x"})

    assert res.status_code == 500
    assert res.json() == {"error": "Failed to generate subtasks"}


def test_breakdown_invalid_json_body_is_500(client: TestClient) -> None:
    res = client.post("/breakdown", content=b"{nope", headers={"content-type": "application/json"})
    assert res.status_code == 500
    assert "error" in res.json()


def test_plan_passes_model_text_through(client: TestClient, llm: FakeLLMClient) -> None:
    llm.next_text = "# Tomorrow's Plan (Monday)\n\n1. **Gym**"
    body = {
        "tasks": [
            {"id": "1", "title": "Gym", "completed": False},
            {"id": "2", "title": "Laundry", "completed": True},
            {"id": "3", "title": "Stretch", "completed": False, "parentId": "1", "aiGenerated": True},
        ],
        "nowISO": "2026-10-18T18:30:00.000Z",
        "timeZone": "Europe/Berlin",
        "locale": "de-DE",
    }

    res = client.post("/plan", json=body)

    assert res.status_code == 200
    assert res.json() == {"plan": "# Tomorrow's Plan (Monday)\n\n1. **Gym**"}
    prompt = llm.last_prompt
    assert "Pending Tasks:\n1. Gym\n2. Stretch" in prompt
    assert "Laundry" not in prompt
    assert "Current datetime: Sonntag, 18. Oktober 2026" in prompt
    assert "- Time zone: Europe/Berlin" in prompt
    assert "- Locale: de-DE" in prompt


def test_plan_defaults_when_context_missing(client: TestClient, llm: FakeLLMClient) -> None:
    res = client.post("/plan", json={"tasks": []})

    assert res.status_code == 200
    assert "- Time zone: UTC" in llm.last_prompt
    assert "- Locale: en-US" in llm.last_prompt
    assert llm.last_prompt.endswith("(none)")


@pytest.mark.parametrize("body", [{}, {"tasks": "nope"}, {"tasks": {"a": 1}}, []])
def test_plan_rejects_non_array_tasks(client: TestClient, llm: FakeLLMClient, body) -> None:
    res = client.post("/plan", json=body)

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid 'tasks' provided"}
    assert llm.calls == []


def test_plan_provider_error_is_500(client: TestClient, llm: FakeLLMClient) -> None:
    llm.error = RuntimeError("down")

    res = client.post("/plan", json={"tasks": [{"title": "a"}]})

    assert res.status_code == 500
    assert res.json() == {"error": "Failed to generate plan"}


def test_plan_bad_time_zone_is_500(client: TestClient, llm: FakeLLMClient) -> None:
    res = client.post("/plan", json={"tasks": [], "timeZone": "Nowhere/Land"})

    assert res.status_code == 500
    assert llm.calls == []


def test_plan_unsupported_locale_still_plans(client: TestClient, llm: FakeLLMClient) -> None:
    llm.next_text = "# Plan"

    res = client.post(
        "/plan",
        json={"tasks": [{"title": "a"}], "nowISO": "2026-10-18T18:30:00.000Z", "locale": "qq-QQ"},
    )

    assert res.status_code == 200
    assert res.json() == {"plan": "# Plan"}
    assert "- Locale: qq-QQ" in llm.last_prompt
    assert "Sunday, October 18, 2026" in llm.last_prompt
