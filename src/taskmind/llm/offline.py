# src/taskmind/llm/offline.py

from __future__ import annotations

import json
import re

_TASK_RE = re.compile(r'^Task: "(?P<title>.*)"$', re.MULTILINE)
_PENDING_RE = re.compile(r"^\d+\. (?P<title>.+)$", re.MULTILINE)


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Behavior:
    - Breakdown prompts -> returns {"subtasks": [...]} built from the task title
    - Day plan prompts -> returns a small markdown plan listing the pending tasks
    - Anything else -> a short notice
    """

    async def generate_text(self, prompt: str, *, model: str) -> str:
        p = prompt or ""

        if '{"subtasks": string[]}' in p:
            m = _TASK_RE.search(p)
            title = m.group("title") if m else "the task"
            return json.dumps(
                {
                    "subtasks": [
                        f"Clarify the goal of: {title}",
                        "List what you need to get started",
                        "Do the first small step",
                    ]
                }
            )

        if "expert day planner" in p:
            _, _, pending = p.partition("Pending Tasks:")
            titles = [m.group("title") for m in _PENDING_RE.finditer(pending)]
            lines = ["# Today's Plan (offline demo)", ""]
            if not titles:
                lines.append("Nothing pending. Enjoy your day!")
            for i, title in enumerate(titles, start=1):
                lines.append(f"{i}. **{title}** - offline demo entry, about 30 minutes")
            lines.extend(["", "_Set TASKMIND_OPENROUTER_API_KEY to enable real plans._"])
            return "\n".join(lines)

        return "Offline demo mode: no external LLM is configured."
