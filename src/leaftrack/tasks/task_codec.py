# src/leaftrack/tasks/task_codec.py

"""
Task record (de)serialization.

A record is a nested mapping:
    id, name, status, pending_until, priority, children

Reading is permissive: anything missing or unparsable falls back to its default.
Writing omits fields equal to their default; `id` and `name` are always written.

Ids are parsed with uuid.UUID and written back in canonical form, so an id this
module wrote comes back byte for byte; other spellings (uppercase, braces, no
dashes) are normalized on the next save.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

import yaml

from ..core.clock import EPOCH_MIN
from ..errors import ProjectLoadError
from .task_models import TaskAttr, TaskStatus
from .task_tree import HierarchyPermit, Task, TaskTree

logger = logging.getLogger(__name__)

# Tried in order; first match wins.
PENDING_UNTIL_FORMATS = ("%Y/%m/%d %H:%M:%S", "%Y/%m/%d %H:%M", "%Y/%m/%d")
PENDING_UNTIL_WRITE_FORMAT = "%Y/%m/%d %H:%M:%S"

PROJECT_KEY = "project"


def parse_pending_until(raw: Any) -> datetime:
    # YAML timestamps (dash dates, ISO with offsets) are not one of the accepted formats.
    if not isinstance(raw, str):
        if raw is not None:
            logger.debug("Non-string pending_until %r; using default", raw)
        return EPOCH_MIN
    text = raw.strip()
    for fmt in PENDING_UNTIL_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    logger.debug("Unparsable pending_until %r; using default", raw)
    return EPOCH_MIN


def _parse_id(raw: Any) -> uuid.UUID:
    if isinstance(raw, str):
        try:
            return uuid.UUID(raw)
        except ValueError:
            logger.debug("Unparsable task id %r; generating a new one", raw)
    return uuid.uuid4()


def _parse_priority(raw: Any) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    return 0


def record_to_attr(record: Any, *, last_synced_time: datetime = EPOCH_MIN) -> TaskAttr:
    if not isinstance(record, dict):
        record = {}
    name = record.get("name")
    return TaskAttr(
        name=name if isinstance(name, str) else "",
        id=_parse_id(record.get("id")),
        orig_status=TaskStatus.from_raw(record.get("status")),
        pending_until=parse_pending_until(record.get("pending_until")),
        last_synced_time=last_synced_time,
        priority=_parse_priority(record.get("priority")),
    )


def _child_records(record: Any) -> list[Any]:
    if not isinstance(record, dict):
        return []
    children = record.get("children")
    return children if isinstance(children, list) else []


def _attach_children(
    parent: Task,
    record: Any,
    last_synced_time: datetime,
    permit: HierarchyPermit,
) -> None:
    for child_record in _child_records(record):
        child = parent.create_as_last_child(
            record_to_attr(child_record, last_synced_time=last_synced_time),
            permit,
        )
        _attach_children(child, child_record, last_synced_time, permit)


def record_to_tree(record: Any, *, last_synced_time: datetime = EPOCH_MIN) -> TaskTree:
    tree = TaskTree.from_attr(record_to_attr(record, last_synced_time=last_synced_time))
    with tree.hierarchy_edit() as permit:
        _attach_children(tree.root(), record, last_synced_time, permit)
    return tree


def task_to_record(task: Task) -> dict[str, Any]:
    attr = task.get_attr()
    record: dict[str, Any] = {"name": attr.name, "id": str(attr.id)}

    if attr.orig_status != TaskStatus.TODO:
        record["status"] = attr.orig_status.value
    if attr.pending_until != EPOCH_MIN:
        record["pending_until"] = attr.pending_until.strftime(PENDING_UNTIL_WRITE_FORMAT)
    if attr.priority != 0:
        record["priority"] = attr.priority

    children = [task_to_record(child) for child in task.children()]
    if children:
        record["children"] = children
    return record


# ---- project.yaml documents ----


def load_project_yaml(text: str, *, last_synced_time: datetime = EPOCH_MIN, source: str = "<string>") -> TaskTree:
    """Parse a `project:` document into a tree. Raises ProjectLoadError on invalid YAML."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ProjectLoadError(f"invalid YAML in {source}: {e}") from e

    record = doc.get(PROJECT_KEY) if isinstance(doc, dict) else None
    if record is None:
        logger.warning("No %r key in %s; loading an empty project", PROJECT_KEY, source)
    return record_to_tree(record, last_synced_time=last_synced_time)


def dump_project_yaml(task: Task) -> str:
    doc = {PROJECT_KEY: task_to_record(task)}
    return yaml.safe_dump(doc, allow_unicode=True, sort_keys=False, default_flow_style=False)
