# src/taskodoro/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

ENV_PREFIX = "TASKODORO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Real environment variables win over .env entries.
load_dotenv(override=False)


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


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


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
    snapshot_path: Path

    # ---- HTTP / Socket.IO server ----
    server_enabled: bool
    host: str
    port: int
    cors_origins: List[str]

    # ---- Pomodoro ----
    tick_interval_seconds: float

    # ---- Console connector ----
    console_enabled: bool
    console_user: str
    moderators: List[str]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskodoro")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskodoro"))
        snapshot_path = _env_path(_k("SNAPSHOT_PATH"), data_dir / "tasks.json")

        server_enabled = _env_bool(_k("SERVER_ENABLED"), True)
        host = _env(_k("HOST"), "127.0.0.1")
        # PORT is what most hosting setups export.
        port = _env_int(_k("PORT"), _env_int("PORT", 3001))
        cors_origins = _env_list(_k("CORS_ORIGINS"), ["*"])

        tick_interval_seconds = max(0.01, _env_float(_k("TICK_INTERVAL_SECONDS"), 1.0))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        console_user = _env(_k("CONSOLE_USER"), "streamer").strip().lower() or "streamer"
        moderators = [m.lower() for m in _env_list(_k("MODERATORS"), [console_user])]

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            snapshot_path=snapshot_path,
            server_enabled=server_enabled,
            host=host,
            port=port,
            cors_origins=cors_origins,
            tick_interval_seconds=tick_interval_seconds,
            console_enabled=console_enabled,
            console_user=console_user,
            moderators=moderators,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
