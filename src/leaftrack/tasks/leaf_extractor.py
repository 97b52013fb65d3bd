# src/leaftrack/tasks/leaf_extractor.py

"""
Actionable leaf extraction.

A leaf is a Todo task with no children, or whose children are all Done.
Done subtrees are pruned entirely. Pending tasks are never emitted but are
still traversed, so Todo descendants of a Pending task surface.

Statuses are read as they are: call sync_clock(now) on the tree first.
"""

from __future__ import annotations

from .task_models import TaskStatus
from .task_tree import Task


def _children_are_all_done(children: list[Task]) -> bool:
    return all(child.get_status() == TaskStatus.DONE for child in children)


def extract_leaves_with_pending(task: Task) -> list[Task]:
    """Recursive step: may return the node itself even if it is Pending."""
    children = task.children()
    status = task.get_status()

    if status == TaskStatus.TODO and _children_are_all_done(children):
        return [task]

    leaves: list[Task] = []
    for child in children:
        if child.get_status() == TaskStatus.DONE:
            continue
        for leaf in extract_leaves_with_pending(child):
            if leaf.get_status() != TaskStatus.PENDING:
                leaves.append(leaf)
    return leaves


def extract_leaf_tasks_from_project(project: Task) -> list[Task]:
    """Actionable leaves under `project`, depth-first, left to right."""
    return [
        leaf
        for leaf in extract_leaves_with_pending(project)
        if leaf.get_status() != TaskStatus.PENDING
    ]


def extract_natural_leaves(task: Task) -> list[Task]:
    """Structural leaves (no children, or all children Done) regardless of status."""
    children = task.children()
    if _children_are_all_done(children):
        return [task]
    leaves: list[Task] = []
    for child in children:
        if child.get_status() != TaskStatus.DONE:
            leaves.extend(extract_natural_leaves(child))
    return leaves
