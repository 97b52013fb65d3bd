# src/leaftrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the composition root:
- loads settings once,
- ensures the local data directories exist,
- builds the repository and the free time ledger, loads them, syncs the clock.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..config import get_settings
from ..core.state import AppState
from ..schedule.free_time_manager import FreeTimeManager
from ..tasks.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.projects_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, now: datetime | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    The clock is synced before loading so every loaded status is evaluated
    against `now` (defaults to the local wall clock, read once here).
    """
    if settings is None:
        settings = get_settings()
    if now is None:
        now = datetime.now()

    _ensure_local_dirs(settings)

    repository = TaskRepository(settings.projects_dir, morning_hour=settings.morning_hour)
    repository.sync_clock(now)
    repository.load()

    free_time = FreeTimeManager()
    busy_slots_path = getattr(settings, "busy_slots_path", None)
    if busy_slots_path is not None:
        free_time.load_busy_time_slots_from_file(busy_slots_path, now)
    else:
        logger.debug("No busy-time template configured; every minute is free")

    return AppState(
        settings=settings,
        task_repository=repository,
        free_time=free_time,
        now=now,
    )
