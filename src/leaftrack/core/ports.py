# src/leaftrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the CLI and application code.

They depend on Protocols instead of concrete implementations, so the
directory-backed repository and the in-memory ledger stay swappable in tests.
"""

import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Protocol

from ..tasks.task_tree import Task


class TaskRepo(Protocol):
    def get_all_projects(self) -> list[Task]: ...
    def load(self) -> None: ...
    def save(self) -> None: ...
    def sync_clock(self, now: datetime) -> None: ...
    def get_last_synced_time(self) -> datetime: ...
    def get_highest_priority_project(self) -> Task | None: ...
    def get_highest_priority_leaf_task_id(self) -> uuid.UUID | None: ...
    def get_by_id(self, task_id: uuid.UUID) -> Task | None: ...
    def start_new_project(self, project_name: str, *, is_deferred: bool = False) -> Task: ...


class FreeTimeLedger(Protocol):
    def get_free_minutes(self, start: datetime, end: datetime) -> int: ...
    def get_busy_minutes(self, start: datetime, end: datetime) -> int: ...
    def register_busy_time_slot(self, start: datetime, end: datetime) -> None: ...
    def get_end_of_day(self, day: date) -> datetime | None: ...
    def load_busy_time_slots_from_file(self, path: str | Path, now: datetime) -> None: ...
    def load_busy_time_slots_from_str(self, text: str, now: datetime) -> None: ...
