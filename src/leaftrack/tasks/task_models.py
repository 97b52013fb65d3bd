# src/leaftrack/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from ..core.clock import EPOCH_MIN


class TaskStatus(StrEnum):
    """
    Task status.

    Notes:
    - orig_status is what the user set; status is derived from it and the clock.
    - "pending" means deferred until pending_until, then it evaluates to "todo".
    """

    TODO = "todo"
    PENDING = "pending"
    DONE = "done"

    @classmethod
    def from_raw(cls, raw: object) -> TaskStatus:
        if not isinstance(raw, str) or not raw.strip():
            return cls.TODO
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.TODO


def evaluate_status(
    orig_status: TaskStatus,
    pending_until: datetime,
    last_synced_time: datetime,
) -> TaskStatus:
    if orig_status == TaskStatus.PENDING and last_synced_time > pending_until:
        return TaskStatus.TODO
    return orig_status


@dataclass(slots=True, eq=False)
class TaskAttr:
    name: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    orig_status: TaskStatus = TaskStatus.TODO
    status: TaskStatus = TaskStatus.TODO
    pending_until: datetime = EPOCH_MIN
    last_synced_time: datetime = EPOCH_MIN
    priority: int = 0

    def __post_init__(self) -> None:
        self.recompute_status()

    def __eq__(self, other: object) -> bool:
        # id is an identity, not a value
        if not isinstance(other, TaskAttr):
            return NotImplemented
        return (
            self.name == other.name
            and self.orig_status == other.orig_status
            and self.status == other.status
            and self.pending_until == other.pending_until
            and self.last_synced_time == other.last_synced_time
            and self.priority == other.priority
        )

    __hash__ = None  # type: ignore[assignment]

    def recompute_status(self) -> None:
        self.status = evaluate_status(self.orig_status, self.pending_until, self.last_synced_time)

    def set_orig_status(self, status: TaskStatus) -> None:
        self.orig_status = status
        self.recompute_status()

    def set_pending_until(self, pending_until: datetime) -> None:
        self.pending_until = pending_until
        self.recompute_status()

    def sync_clock(self, now: datetime) -> None:
        self.last_synced_time = now
        self.recompute_status()

    def copy(self) -> TaskAttr:
        return TaskAttr(
            name=self.name,
            id=self.id,
            orig_status=self.orig_status,
            status=self.status,
            pending_until=self.pending_until,
            last_synced_time=self.last_synced_time,
            priority=self.priority,
        )
