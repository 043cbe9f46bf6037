# src/taskmind/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts one surface:
- `taskmind`        -> interactive console (task list + AI commands),
- `taskmind serve`  -> HTTP API (POST /breakdown, POST /plan) via uvicorn.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskmind", description="AI-assisted task list.")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("console", help="Interactive console (default).")

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=settings.server_host)
    serve.add_argument("--port", type=int, default=settings.server_port)
    return parser


def _serve(state, host: str, port: int) -> None:
    import uvicorn

    from ..api.server import create_app

    logger.info("HTTP API on http://%s:%s", host, port)
    uvicorn.run(create_app(state), host=host, port=port, log_config=None)


async def _run_console(state) -> None:
    from ..connectors.console_connector import run_console_loop

    try:
        await run_console_loop(state)
    finally:
        aclose = getattr(state.llm, "aclose", None)
        if callable(aclose):
            try:
                await aclose()
            except Exception:
                logger.debug("LLM client close failed.", exc_info=True)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    args = _build_parser(settings).parse_args(argv)

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    # keep noisy libs readable
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    if args.command == "serve":
        _serve(state, args.host, args.port)
    elif settings.console_enabled:
        try:
            asyncio.run(_run_console(state))
        except KeyboardInterrupt:
            logger.info("Interrupted.")
    else:
        logger.info("Console disabled (TASKMIND_CONSOLE_ENABLED=false). Use `taskmind serve`.")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
