# src/taskglitch/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Malformed values fall back to defaults instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKGLITCH"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


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

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Initial load ----
    # URL (http/https) or path to a JSON file with raw task records.
    tasks_source: str
    seed_count: int
    fetch_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    export_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskglitch").strip() or "taskglitch"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskglitch"))
        export_path = _env_path(_k("EXPORT_PATH"), data_dir / "tasks.csv")

        tasks_source = _env(_k("TASKS_SOURCE"), "").strip() or str(data_dir / "tasks.json")
        seed_count = max(0, _env_int(_k("SEED_COUNT"), 50))
        fetch_timeout_seconds = _env_float(_k("FETCH_TIMEOUT_SECONDS"), 10.0)
        if fetch_timeout_seconds <= 0:
            fetch_timeout_seconds = 10.0

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            tasks_source=tasks_source,
            seed_count=seed_count,
            fetch_timeout_seconds=fetch_timeout_seconds,
            data_dir=data_dir,
            export_path=export_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
