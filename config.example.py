# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKMIND_APP_NAME": "App display name (default: taskmind).",
    "TASKMIND_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKMIND_CONSOLE_ENABLED": "Run the interactive console by default (true/false).",
    # LLM / OpenRouter
    "TASKMIND_OPENROUTER_API_KEY": "OpenRouter API key (without it an offline demo client is used).",
    "TASKMIND_OPENROUTER_BASE_URL": "OpenAI-compatible base URL (default: https://openrouter.ai/api/v1).",
    "TASKMIND_LLM_MODEL": "Model id for breakdowns and plans (default: google/gemini-2.5-flash).",
    "TASKMIND_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout for the model client (default: 5).",
    "TASKMIND_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout for the model client (default: 60).",
    "TASKMIND_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "TASKMIND_APP_TITLE": "Optional OpenRouter metadata header title.",
    # Day planning context (console)
    "TASKMIND_TIME_ZONE": "IANA time zone used for /plan (default: UTC).",
    "TASKMIND_LOCALE": "BCP-47 locale used for /plan (default: en-US).",
    # Paths (gitignored)
    "TASKMIND_DATA_DIR": "Local data directory (default: .local/taskmind).",
    "TASKMIND_STORAGE_PATH": "Tasks + plan JSON file (default: <data_dir>/storage.json).",
    # HTTP server
    "TASKMIND_HOST": "Bind host for `taskmind serve` (default: 127.0.0.1).",
    "TASKMIND_PORT": "Bind port for `taskmind serve` (default: 8000).",
}
