# src/taskpulse/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every variable has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKPULSE"


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

    # ---- Local data (ignored by git) ----
    data_dir: Path
    store_path: Path
    storage_key: str
    persist: bool

    # ---- Feedback ----
    sound_enabled: bool
    sample_rate: int
    master_volume: float

    # ---- Console ----
    boot_animation: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpulse") or "taskpulse"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpulse"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "storage.json")
        storage_key = _env(_k("STORAGE_KEY"), "react-todo-list").strip() or "react-todo-list"
        persist = _env_bool(_k("PERSIST"), True)

        sound_enabled = _env_bool(_k("SOUND"), True)
        sample_rate = _env_int(_k("SAMPLE_RATE"), 44100)
        if sample_rate <= 0:
            sample_rate = 44100
        master_volume = min(max(_env_float(_k("MASTER_VOLUME"), 1.0), 0.0), 4.0)

        boot_animation = _env_bool(_k("BOOT_ANIMATION"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            storage_key=storage_key,
            persist=persist,
            sound_enabled=sound_enabled,
            sample_rate=sample_rate,
            master_volume=master_volume,
            boot_animation=boot_animation,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
