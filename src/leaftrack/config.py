# src/leaftrack/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Every variable is LEAFTRACK_<NAME>. Blank values count as unset, and values
that do not parse fall back to the default instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "LEAFTRACK"
DEFAULT_DATA_DIR = Path(".local/leaftrack")

# Real environment variables win over .env entries.
load_dotenv(override=False)


def _raw(name: str) -> str | None:
    """Stripped value of LEAFTRACK_<name>, or None when unset or blank."""
    value = os.getenv(f"{ENV_PREFIX}_{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _str(name: str, default: str) -> str:
    value = _raw(name)
    return default if value is None else value


def _int_between(name: str, default: int, lo: int, hi: int) -> int:
    value = _raw(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if lo <= parsed <= hi else default


def _path(name: str, default: Path | None) -> Path | None:
    value = _raw(name)
    return default if value is None else Path(value).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    projects_dir: Path
    busy_slots_path: Path | None

    # ---- Scheduling ----
    morning_hour: int

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _path("DATA_DIR", DEFAULT_DATA_DIR)
        return Settings(
            app_name=_str("APP_NAME", "leaftrack"),
            log_level=_str("LOG_LEVEL", "INFO").upper(),
            data_dir=data_dir,
            projects_dir=_path("PROJECTS_DIR", data_dir / "projects"),
            busy_slots_path=_path("BUSY_SLOTS_PATH", None),
            morning_hour=_int_between("MORNING_HOUR", 6, 0, 23),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
