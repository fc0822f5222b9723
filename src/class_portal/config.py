# src/class_portal/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PORTAL"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    data_dir: Path
    storage_backend: str  # "sqlite" | "memory"
    storage_db_path: Path
    storage_quota_chars: int | None  # None = unlimited

    # ---- Keys ----
    timetable_key: str
    todo_key: str

    # ---- Timetable ----
    default_color: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "class-portal") or "class-portal"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/class_portal"))
        storage_backend = _env(_k("STORAGE_BACKEND"), "sqlite").strip().lower() or "sqlite"
        storage_db_path = _env_path(_k("STORAGE_DB_PATH"), data_dir / "storage.sqlite3")

        quota = _env_int(_k("STORAGE_QUOTA_CHARS"), 5_000_000)
        storage_quota_chars = quota if quota > 0 else None

        timetable_key = _env(_k("TIMETABLE_KEY"), "class_portal_timetable")
        todo_key = _env(_k("TODO_KEY"), "class_portal_todo")

        default_color = _env(_k("DEFAULT_COLOR"), "#e1effe").strip() or "#e1effe"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_db_path=storage_db_path,
            storage_quota_chars=storage_quota_chars,
            timetable_key=timetable_key,
            todo_key=todo_key,
            default_color=default_color,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
