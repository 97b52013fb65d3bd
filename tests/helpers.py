# tests/helpers.py

from __future__ import annotations

from datetime import datetime
from typing import Any

from leaftrack.core.clock import EPOCH_MIN
from leaftrack.tasks.task_models import TaskAttr, TaskStatus
from leaftrack.tasks.task_tree import HierarchyPermit, Task, TaskTree

TODO = TaskStatus.TODO
PENDING = TaskStatus.PENDING
DONE = TaskStatus.DONE


def node(
    name: str,
    status: TaskStatus = TODO,
    *children: Any,
    pending_until: datetime = EPOCH_MIN,
    priority: int = 0,
) -> tuple[TaskAttr, tuple[Any, ...]]:
    attr = TaskAttr(name=name, orig_status=status, pending_until=pending_until, priority=priority)
    return attr, children


def _add(parent: Task, children: tuple[Any, ...], permit: HierarchyPermit) -> None:
    for attr, grandchildren in children:
        child = parent.create_as_last_child(attr, permit)
        _add(child, grandchildren, permit)


def build(shape: tuple[TaskAttr, tuple[Any, ...]]) -> Task:
    """Build a tree from nested node(...) tuples and return its root handle."""
    attr, children = shape
    tree = TaskTree.from_attr(attr)
    root = tree.root()
    with tree.hierarchy_edit() as permit:
        _add(root, children, permit)
    return root


def find(root: Task, name: str) -> Task:
    for task in root.iter_subtree():
        if task.get_name() == name:
            return task
    raise KeyError(name)


def names(tasks: list[Task]) -> list[str]:
    return [t.get_name() for t in tasks]
