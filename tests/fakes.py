# tests/fakes.py

from __future__ import annotations

import asyncio


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures calls for assertions
    - Returns a predefined text, or raises `error` if set
    """

    def __init__(self, next_text: str = "ok", error: Exception | None = None) -> None:
        self.next_text = next_text
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def generate_text(self, prompt: str, *, model: str) -> str:
        self.calls.append((prompt, model))
        if self.error is not None:
            raise self.error
        return self.next_text

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][0]


class GatedLLMClient(FakeLLMClient):
    """
    Fake that blocks every call until `release()` is called.

    Used to observe in-flight state (loading flags) from the test.
    """

    def __init__(self, next_text: str = "ok") -> None:
        super().__init__(next_text)
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def generate_text(self, prompt: str, *, model: str) -> str:
        self.calls.append((prompt, model))
        await self._gate.wait()
        return self.next_text
