# src/taskmind/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    return exc.__class__.__name__ in {
        "AuthenticationError",
        "PermissionDeniedError",
        "UnauthorizedError",
    }


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"RateLimitError", "TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    return exc.__class__.__name__ in {
        "APIConnectionError",
        "APITimeoutError",
        "Timeout",
        "ConnectTimeout",
        "ReadTimeout",
        "WriteTimeout",
    }


def _is_not_found_error(exc: Exception) -> bool:
    # OpenAI-compatible SDK uses NotFoundError for HTTP 404 (unknown model)
    return exc.__class__.__name__ in {"NotFoundError"}


def _make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "LLM API key is not set" in msg:
        return "LLM is not configured (missing API key). Set TASKMIND_OPENROUTER_API_KEY in .env."
    if "LLM base URL is not set" in msg:
        return "LLM is not configured (missing base URL). Set TASKMIND_OPENROUTER_BASE_URL in .env."
    return msg


def _message_text(response: Any) -> str:
    """Pull the text of the first choice out of a chat completion (empty if absent)."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


class OpenRouterLLMClient:
    """
    Async single-shot completion client for OpenRouter (or any OpenAI-compatible API).

    - No secrets required at import time; the constructor raises if not configured.
    - Automatic retries are disabled: one request per call, failures are final.
    - Provider errors are re-raised as RuntimeError with a readable message.
    """

    def __init__(self, settings: Any) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = getattr(settings, "openrouter_base_url", "") or ""

        if not api_key or not str(api_key).strip():
            raise RuntimeError("LLM API key is not set. Set TASKMIND_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("LLM base URL is not set. Set TASKMIND_OPENROUTER_BASE_URL in your .env.")

        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._client = AsyncOpenAI(
            base_url=str(base_url),
            api_key=str(api_key),
            timeout=_make_timeout(
                connect_s=float(getattr(settings, "llm_connect_timeout", 5.0)),
                read_s=float(getattr(settings, "llm_read_timeout", 60.0)),
            ),
            max_retries=0,
        )

    async def generate_text(self, prompt: str, *, model: str) -> str:
        model = (model or "").strip()
        if not model:
            raise RuntimeError("LLM model is not set. Set TASKMIND_LLM_MODEL in your .env.")

        logger.info("LLM: request model=%s prompt_len=%d", model, len(prompt))
        t0 = time.monotonic()
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                extra_headers=self._headers or None,
            )
        except Exception as e:
            if _is_auth_error(e):
                raise RuntimeError(
                    "LLM authentication failed. Check your API key (TASKMIND_OPENROUTER_API_KEY)."
                ) from e
            if _is_not_found_error(e):
                raise RuntimeError(f"LLM model not available: {model}") from e
            if _is_rate_limit_error(e):
                raise RuntimeError("LLM is rate-limited. Try again later.") from e
            if _is_connection_error(e):
                raise RuntimeError("LLM network/timeout error. Try again later.") from e
            raise RuntimeError(f"LLM request failed ({e.__class__.__name__}).") from e

        text = _message_text(response)
        logger.info("LLM: response model=%s len=%d (%.2fs)", model, len(text), time.monotonic() - t0)
        return text

    async def aclose(self) -> None:
        await self._client.close()
