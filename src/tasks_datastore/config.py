# src/tasks_datastore/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKS"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    preferences_db_path: Path
    legacy_preferences_path: Path

    # ---- UI ----
    live_data_timeout_seconds: float
    seed_sample_tasks: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasks") or "tasks"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasks"))
        preferences_db_path = _env_path(
            _k("PREFERENCES_DB_PATH"), data_dir / "user_preferences.sqlite3"
        )
        legacy_preferences_path = _env_path(
            _k("LEGACY_PREFERENCES_PATH"), data_dir / "user_preferences.json"
        )

        # Grace period before an unobserved UI stream stops collecting.
        live_data_timeout_seconds = max(0.0, _env_float(_k("LIVE_DATA_TIMEOUT"), 5.0))
        seed_sample_tasks = _env_bool(_k("SEED_SAMPLE_TASKS"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            preferences_db_path=preferences_db_path,
            legacy_preferences_path=legacy_preferences_path,
            live_data_timeout_seconds=live_data_timeout_seconds,
            seed_sample_tasks=seed_sample_tasks,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
