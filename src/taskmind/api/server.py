"""
taskmind HTTP API
Two JSON endpoints in front of the model: task breakdown and day planning.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.state import AppState
from ..planning.breakdown import generate_subtasks
from ..planning.day_plan import generate_plan, parse_now
from ..tasks.task_models import Task
from .models import BreakdownResponse, ErrorResponse, PlanResponse

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content=ErrorResponse(error=message).model_dump(), status_code=status_code)


def _model(state: AppState) -> str:
    return str(getattr(state.settings, "llm_model", "") or "google/gemini-2.5-flash")


def create_app(state: AppState) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s API...", getattr(state.settings, "app_name", "taskmind"))
        yield
        aclose = getattr(state.llm, "aclose", None)
        if callable(aclose):
            try:
                await aclose()
            except Exception:
                logger.debug("LLM client close failed.", exc_info=True)
        logger.info("API stopped.")

    app = FastAPI(title="taskmind", lifespan=lifespan)
    app.state.core = state

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": getattr(state.settings, "app_name", "taskmind"),
            "llm_client": state.llm.__class__.__name__,
            "model": _model(state),
        }

    @app.post("/breakdown")
    async def breakdown(request: Request):
        """
        Split one task title into 0-5 subtasks.
        Body: {"title": str}
        """
        try:
            body: Any = await request.json()
            title = body.get("title") if isinstance(body, dict) else None
            if not isinstance(title, str) or not title.strip():
                return _error("Invalid 'title' provided", 400)

            subtasks = await generate_subtasks(state.llm, title, model=_model(state))
            return BreakdownResponse(subtasks=subtasks).model_dump()
        except Exception:
            logger.exception("/breakdown error")
            return _error("Failed to generate subtasks", 500)

    @app.post("/plan")
    async def plan(request: Request):
        """
        Build a day plan for the pending tasks in the request.
        Body: {"tasks": Task[], "nowISO"?: str, "timeZone"?: str, "locale"?: str}
        """
        try:
            body: Any = await request.json()
            if not isinstance(body, dict) or not isinstance(body.get("tasks"), list):
                return _error("Invalid 'tasks' provided", 400)

            tasks = [Task.from_dict(t) for t in body["tasks"] if isinstance(t, dict)]
            text = await generate_plan(
                state.llm,
                tasks,
                model=_model(state),
                now=parse_now(body.get("nowISO")),
                time_zone=body.get("timeZone") or None,
                locale=body.get("locale") or None,
            )
            return PlanResponse(plan=text).model_dump()
        except Exception:
            logger.exception("/plan error")
            return _error("Failed to generate plan", 500)

    return app
