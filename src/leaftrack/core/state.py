# src/leaftrack/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .ports import FreeTimeLedger, TaskRepo


@dataclass
class AppState:
    # Settings are kept on the state so commands do not re-read the environment.
    settings: object

    task_repository: TaskRepo
    free_time: FreeTimeLedger

    now: datetime
