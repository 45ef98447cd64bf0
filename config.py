"""
Centralized configuration for the roster bot and HTTP API.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_int_list(env_var: str, default: list[int]) -> list[int]:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return [int(x.strip()) for x in raw.split(",") if x.strip()]
    except ValueError:
        return default


DATA_DIR = os.getenv("DATA_DIR", ".data")
DB_PATH = os.getenv("DB_PATH", os.path.join(DATA_DIR, "database.sqlite"))
DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN")
ADMIN_USER_IDS: list[int] = _parse_int_list("ADMIN_USER_IDS", [])

# HTTP API
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = _parse_int("PORT", 3000)
RUN_API_WITH_BOT = _parse_bool("RUN_API_WITH_BOT", False)
