# src/taskmind/planning/day_plan.py

"""
Day planning prompt.

This module only frames the request: it renders "now" in the caller's time zone and
locale, lists pending task titles and spells out the scheduling rules. The rules are
applied by the model; the returned markdown is passed through untouched and never
validated here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import pytz
from babel import Locale, UnknownLocaleError
from babel.dates import format_date, format_time, get_datetime_format

from ..core.ports import LLMClient

logger = logging.getLogger(__name__)

DEFAULT_TIME_ZONE = "UTC"
DEFAULT_LOCALE = "en-US"

PLAN_ERROR_TEXT = "There was an error generating a plan. Please try again."

PLAN_PROMPT_TEMPLATE = """
You are an expert day planner. Consider the list of pending tasks and produce a concise plan.

Return strictly in well-structured GitHub-Flavored Markdown with:
- A top-level heading for the plan date, e.g., "Today's Plan ({heading_date})" or "Tomorrow's Plan (DATE)"
- For each item: a numbered list entry with a bolded title, a short reasoning, and a time estimate in minutes
- Under each item, include a sub-list for schedule blocks (local time ranges)
- Use blank lines between major sections for readability

Scheduling rules:
- Use the provided local context strictly. Do NOT schedule anything in the past.
- If current local time is earlier than typical work hours, start at the nearest reasonable start time.
- If current local time has already passed part of the day, start at the next quarter-hour at or after the current time.
- If the current local time is late (after 8:00 PM local), plan for tomorrow instead, starting around 9:00 AM local, and set the heading to "Tomorrow's Plan".
- Use the user's locale {locale} and time zone {time_zone} when formatting times (AM/PM if applicable).

Context:
- Current datetime: {current_datetime}
- Time zone: {time_zone}
- Locale: {locale}

Pending Tasks:
{task_lines}
""".strip()


@dataclass(frozen=True, slots=True)
class LocalContext:
    """'Now' as seen by the user, pre-rendered for the prompt."""

    local_now: datetime
    time_zone: str
    locale: str
    datetime_text: str  # full date + short time
    date_text: str  # full date only (used in the example heading)


def parse_now(now_iso: str | None) -> datetime:
    """
    Parse an ISO-8601 instant ("...Z" accepted). Naive values are taken as UTC.
    None/empty means the current instant. Invalid input raises ValueError.
    """
    if not now_iso:
        return datetime.now(UTC)
    parsed = datetime.fromisoformat(str(now_iso).strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_now(
    now: datetime,
    time_zone: str | None = None,
    locale: str | None = None,
) -> LocalContext:
    """
    Render `now` in `time_zone` using `locale` conventions.

    Unknown time zones (pytz.UnknownTimeZoneError) and malformed locale tags
    (ValueError) propagate. A well-formed locale Babel has no data for is rendered
    with DEFAULT_LOCALE conventions; the requested tag is still reported.
    """
    tz_name = time_zone or DEFAULT_TIME_ZONE
    loc_name = locale or DEFAULT_LOCALE

    tz = pytz.timezone(tz_name)
    try:
        loc = Locale.parse(loc_name, sep="-") if "-" in loc_name else Locale.parse(loc_name)
    except UnknownLocaleError:
        logger.warning("Unknown locale %r, formatting with %s", loc_name, DEFAULT_LOCALE)
        loc = Locale.parse(DEFAULT_LOCALE, sep="-")

    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    local_now = now.astimezone(tz)

    date_text = format_date(local_now, format="full", locale=loc)
    time_text = format_time(local_now, format="short", tzinfo=tz, locale=loc)
    datetime_text = (
        get_datetime_format("full", locale=loc)
        .replace("'", "")
        .replace("{0}", time_text)
        .replace("{1}", date_text)
    )

    return LocalContext(
        local_now=local_now,
        time_zone=tz_name,
        locale=loc_name,
        datetime_text=datetime_text,
        date_text=date_text,
    )


def _task_field(task: Any, attr: str, key: str) -> Any:
    if isinstance(task, dict):
        return task.get(key)
    return getattr(task, attr, None)


def pending_titles(tasks: Iterable[Any]) -> list[str]:
    """
    Titles of not-completed tasks, subtasks flattened alongside roots, order kept.

    A subtask whose parent is completed counts as done even if its own flag is not.
    """
    items = list(tasks)
    done_ids = {
        str(_task_field(t, "id", "id"))
        for t in items
        if _task_field(t, "completed", "completed") and _task_field(t, "id", "id")
    }

    titles: list[str] = []
    for t in items:
        if _task_field(t, "completed", "completed"):
            continue
        parent_id = _task_field(t, "parent_id", "parentId")
        if parent_id and str(parent_id) in done_ids:
            continue
        titles.append(str(_task_field(t, "title", "title") or ""))
    return titles


def build_plan_prompt(
    tasks: Iterable[Any],
    *,
    now: datetime | None = None,
    time_zone: str | None = None,
    locale: str | None = None,
) -> str:
    ctx = format_now(now or datetime.now(UTC), time_zone, locale)
    titles = pending_titles(tasks)
    task_lines = "\n".join(f"{i}. {title}" for i, title in enumerate(titles, start=1))

    return PLAN_PROMPT_TEMPLATE.format(
        heading_date=ctx.date_text,
        current_datetime=ctx.datetime_text,
        time_zone=ctx.time_zone,
        locale=ctx.locale,
        task_lines=task_lines or "(none)",
    )


async def generate_plan(
    llm: LLMClient,
    tasks: Iterable[Any],
    *,
    model: str,
    now: datetime | None = None,
    time_zone: str | None = None,
    locale: str | None = None,
) -> str:
    """Ask the model for a day plan. The text comes back as-is; errors propagate."""
    prompt = build_plan_prompt(tasks, now=now, time_zone=time_zone, locale=locale)
    text = await llm.generate_text(prompt, model=model)
    logger.info("Plan generated len=%d", len(text or ""))
    return text or ""
