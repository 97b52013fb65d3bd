# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from leaftrack.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for suffix in ("APP_NAME", "LOG_LEVEL", "DATA_DIR", "PROJECTS_DIR", "BUSY_SLOTS_PATH", "MORNING_HOUR"):
        monkeypatch.delenv(f"LEAFTRACK_{suffix}", raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()

    assert settings.app_name == "leaftrack"
    assert settings.log_level == "INFO"
    assert settings.data_dir == Path(".local/leaftrack")
    assert settings.projects_dir == Path(".local/leaftrack") / "projects"
    assert settings.busy_slots_path is None
    assert settings.morning_hour == 6


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LEAFTRACK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("LEAFTRACK_BUSY_SLOTS_PATH", str(tmp_path / "busy.yaml"))
    monkeypatch.setenv("LEAFTRACK_MORNING_HOUR", "7")

    settings = Settings.from_env()

    assert settings.projects_dir == tmp_path / "projects"
    assert settings.busy_slots_path == tmp_path / "busy.yaml"
    assert settings.morning_hour == 7


@pytest.mark.parametrize("raw", ["abc", "24", "-1"])
def test_invalid_morning_hour_falls_back(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("LEAFTRACK_MORNING_HOUR", raw)

    assert Settings.from_env().morning_hour == 6


def test_blank_values_count_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEAFTRACK_APP_NAME", "   ")
    monkeypatch.setenv("LEAFTRACK_BUSY_SLOTS_PATH", "")
    monkeypatch.setenv("LEAFTRACK_LOG_LEVEL", " debug ")

    settings = Settings.from_env()

    assert settings.app_name == "leaftrack"
    assert settings.busy_slots_path is None
    assert settings.log_level == "DEBUG"
