# src/taskmind/planning/extraction.py

"""
Subtask extraction from raw model text.

Models are asked for strict JSON ({"subtasks": [...]}) but do not always comply.
The text goes through an ordered chain of stages; the first stage that returns a
list wins:

1. parse the whole text as JSON,
2. strip markdown code fences and parse again,
3. split into lines and strip list markers (always succeeds).

Once a stage obtains any valid JSON document the chain stops, even if the document
has no usable "subtasks" list: that yields an empty result, not a fall-through.

Whatever stage won, items are coerced to trimmed strings, empties are dropped and
the result is capped at `limit`. Nothing here raises.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

MAX_SUBTASKS = 5

_FENCE_RE = re.compile(r"```json|```")
_LINE_SPLIT_RE = re.compile(r"\r?\n")
# Leading ordinals/bullets: "1. ", "- ", "* ", "2) ".
_LIST_PREFIX_RE = re.compile(r"^[-*\d.\s]+\)?")

Stage = Callable[[str, int], list[Any] | None]


def _subtasks_field(doc: Any) -> list[Any]:
    if isinstance(doc, dict):
        items = doc.get("subtasks")
        if isinstance(items, list):
            return items
    return []


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON.
    raise ValueError(f"invalid JSON constant {name}")


def parse_structured(text: str, limit: int = MAX_SUBTASKS) -> list[Any] | None:
    """Stage 1: whole text as JSON. None if it is not valid JSON."""
    try:
        doc = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError):
        return None
    return _subtasks_field(doc)


def parse_fenced(text: str, limit: int = MAX_SUBTASKS) -> list[Any] | None:
    """Stage 2: drop ```json / ``` markers, then parse as JSON."""
    cleaned = _FENCE_RE.sub("", text).strip()
    return parse_structured(cleaned, limit)


def parse_lines(text: str, limit: int = MAX_SUBTASKS) -> list[Any]:
    """Stage 3: one item per non-empty line, list markers stripped from the start."""
    out: list[str] = []
    for line in _LINE_SPLIT_RE.split(text):
        item = _LIST_PREFIX_RE.sub("", line, count=1).strip()
        if item:
            out.append(item)
    return out[:limit]


STAGES: tuple[tuple[str, Stage], ...] = (
    ("structured", parse_structured),
    ("fenced", parse_fenced),
    ("lines", parse_lines),
)


def _clean(items: list[Any], limit: int) -> list[str]:
    titles = [item.strip() if isinstance(item, str) else "" for item in items]
    return [t for t in titles if t][: max(0, limit)]


def extract_subtasks(raw: Any, limit: int = MAX_SUBTASKS) -> list[str]:
    """Turn raw model output into at most `limit` non-empty, trimmed subtask titles."""
    text = raw if isinstance(raw, str) else ("" if raw is None else str(raw))

    for name, stage in STAGES:
        try:
            items = stage(text, limit)
        except Exception:
            # A stage must never take the request down; try the next one.
            logger.debug("Extraction stage %s crashed", name, exc_info=True)
            continue
        if items is None:
            continue
        result = _clean(items, limit)
        logger.debug("Extraction stage=%s items=%d", name, len(result))
        return result

    return []
