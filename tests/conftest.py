# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the CLI.

    A SimpleNamespace keeps tests independent of the process environment.
    """
    return SimpleNamespace(
        app_name="leaftrack-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        projects_dir=tmp_path / "data" / "projects",
        busy_slots_path=None,
        morning_hour=6,
    )


@pytest.fixture()
def now() -> datetime:
    # Saturday
    return datetime(2023, 4, 1, 12, 0, 0)


@pytest.fixture()
def example_template_path() -> Path:
    return REPO_ROOT / "busy_slots.example.yaml"
