# src/taskmind/planning/breakdown.py

from __future__ import annotations

import logging

from ..core.ports import LLMClient
from .extraction import MAX_SUBTASKS, extract_subtasks

logger = logging.getLogger(__name__)

BREAKDOWN_PROMPT_TEMPLATE = """
You are a helpful productivity assistant. Break the following task into 3-5 concrete, actionable subtasks suitable for a beginner. Respond ONLY in strict JSON with the shape {{"subtasks": string[]}}.

Task: "{title}"

Rules:
- 3 to 5 short subtasks
- No numbering, just plain strings
- No explanations, no extra fields, valid JSON only
""".strip()


def build_breakdown_prompt(title: str) -> str:
    return BREAKDOWN_PROMPT_TEMPLATE.format(title=title.strip())


async def generate_subtasks(
    llm: LLMClient,
    title: str,
    *,
    model: str,
    limit: int = MAX_SUBTASKS,
) -> list[str]:
    """
    Ask the model to split `title` into subtasks.

    Provider errors propagate to the caller; malformed output never does (the
    extraction chain always produces a list, possibly empty).
    """
    if not isinstance(title, str) or not title.strip():
        raise ValueError("title is required")

    raw = await llm.generate_text(build_breakdown_prompt(title), model=model)
    subtasks = extract_subtasks(raw, limit=limit)
    logger.info("Breakdown produced %d subtask(s) raw_len=%d", len(subtasks), len(raw or ""))
    return subtasks
