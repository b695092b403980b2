"""Static configuration for solvedbot.

All user-editable settings (storage, lookup, polling, logging) live in a
single JSON file for quick edits without touching Python. Secrets stay in the
environment (.env).
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("SOLVEDBOT_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite subscription database.
_storage = _CONFIG.get("storage", {})
DB_PATH = _resolve_path(_storage.get("db_path", "solvedbot.db"))

# solved.ac API endpoint and per-request timeout.
_lookup = _CONFIG.get("lookup", {})
LOOKUP_BASE_URL = _lookup.get("base_url", "https://solved.ac/api/v3")
LOOKUP_TIMEOUT_SECONDS = float(_lookup.get("timeout_seconds", 10))

# Rating poll trigger and fan-out.
# - POLL_INTERVAL_MINUTES: in-process trigger for `run`; 0 leaves polling to cron
# - POLL_MAX_CONCURRENCY: subscribers checked at the same time within a cycle
_polling = _CONFIG.get("polling", {})
POLL_INTERVAL_MINUTES = int(_polling.get("interval_minutes", 10))
POLL_MAX_CONCURRENCY = int(_polling.get("max_concurrency", 4))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
