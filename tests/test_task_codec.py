# tests/test_task_codec.py

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

import pytest
import yaml

from leaftrack.core.clock import EPOCH_MIN
from leaftrack.errors import ProjectLoadError
from leaftrack.tasks.task_codec import (
    dump_project_yaml,
    load_project_yaml,
    parse_pending_until,
    record_to_tree,
    task_to_record,
)
from leaftrack.tasks.task_models import TaskStatus
from leaftrack.tasks.task_tree import Task

from .helpers import DONE, PENDING, TODO, build, names, node


def _load(text: str):
    return record_to_tree(yaml.safe_load(text)).root()


def test_missing_children_key_means_no_children() -> None:
    assert _load("name: 'task1'") == Task.new("task1")


def test_empty_children_list() -> None:
    assert _load("name: 'task1'\nchildren: []\n") == Task.new("task1")


def test_null_children() -> None:
    assert _load("name: 'task1'\nchildren:\n") == Task.new("task1")


def test_children_are_parsed_recursively() -> None:
    root = _load(
        """
name: parent
children:
  - name: child
    children:
      - name: grandchild
  - name: second
"""
    )

    assert root == build(node("parent", TODO, node("child", TODO, node("grandchild")), node("second")))
    assert names(list(root.iter_subtree())) == ["parent", "child", "grandchild", "second"]


def test_defaults_for_missing_fields() -> None:
    root = _load("{}")

    assert root.get_name() == ""
    assert root.get_orig_status() == TaskStatus.TODO
    assert root.get_pending_until() == EPOCH_MIN
    assert root.get_priority() == 0
    assert isinstance(root.get_id(), uuid.UUID)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("done", TaskStatus.DONE),
        ("DONE", TaskStatus.DONE),
        ("Pending", TaskStatus.PENDING),
        ("todo", TaskStatus.TODO),
        ("someday", TaskStatus.TODO),
        ("", TaskStatus.TODO),
        (3, TaskStatus.TODO),
        (None, TaskStatus.TODO),
    ],
)
def test_status_parsing_is_permissive(raw, expected) -> None:
    root = record_to_tree({"name": "t", "status": raw}).root()
    assert root.get_orig_status() == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2023/04/01 10:20:30", datetime(2023, 4, 1, 10, 20, 30)),
        ("2023/04/01 10:20", datetime(2023, 4, 1, 10, 20)),
        ("2023/04/01", datetime(2023, 4, 1)),
        ("2023-04-01 10:20", EPOCH_MIN),
        ("tomorrow", EPOCH_MIN),
        (None, EPOCH_MIN),
        (20230401, EPOCH_MIN),
        (datetime(2099, 4, 1, 10, 0), EPOCH_MIN),
    ],
)
def test_pending_until_formats(raw, expected) -> None:
    assert parse_pending_until(raw) == expected


@pytest.mark.parametrize("stamp", ["2023-04-01T10:00:00+09:00", "2099-04-01 10:00:00"])
def test_yaml_timestamps_fall_back_to_epoch_min(stamp: str, now: datetime) -> None:
    text = f"project:\n  name: p\n  status: pending\n  pending_until: {stamp}\n"

    root = load_project_yaml(text, last_synced_time=now).root()

    assert root.get_pending_until() == EPOCH_MIN
    assert root.get_orig_status() == TaskStatus.PENDING
    assert root.get_status() == TaskStatus.TODO


@pytest.mark.parametrize(("raw", "expected"), [(5, 5), (-2, -2), ("high", 0), (1.5, 0), (True, 0), (None, 0)])
def test_priority_parsing(raw, expected) -> None:
    assert record_to_tree({"priority": raw}).root().get_priority() == expected


def test_id_is_kept_when_parseable() -> None:
    task_id = uuid.uuid4()
    root = record_to_tree({"id": str(task_id)}).root()
    assert root.get_id() == task_id


def test_canonical_id_is_written_back_verbatim() -> None:
    raw = "6f1c2a9e-3b4d-4c5e-8f70-1a2b3c4d5e6f"
    assert task_to_record(record_to_tree({"name": "t", "id": raw}).root())["id"] == raw


def test_non_canonical_id_spelling_is_normalized() -> None:
    raw = "{6F1C2A9E-3B4D-4C5E-8F70-1A2B3C4D5E6F}"
    root = record_to_tree({"name": "t", "id": raw}).root()

    assert root.get_id() == uuid.UUID(raw)
    assert task_to_record(root)["id"] == "6f1c2a9e-3b4d-4c5e-8f70-1a2b3c4d5e6f"


def test_unparseable_id_gets_a_fresh_one() -> None:
    first = record_to_tree({"id": "not-a-uuid"}).root()
    second = record_to_tree({"id": "not-a-uuid"}).root()
    assert first.get_id() != second.get_id()


def test_pending_status_is_evaluated_against_last_synced_time(now: datetime) -> None:
    record = {"name": "t", "status": "pending", "pending_until": "2023/04/01 10:00"}

    expired = record_to_tree(record, last_synced_time=now).root()
    waiting = record_to_tree(record, last_synced_time=now - timedelta(hours=3)).root()

    assert expired.get_status() == TaskStatus.TODO
    assert waiting.get_status() == TaskStatus.PENDING


def test_task_to_record_omits_defaults() -> None:
    root = Task.new("plain")

    assert task_to_record(root) == {"name": "plain", "id": str(root.get_id())}


def test_task_to_record_writes_non_defaults() -> None:
    root = build(
        node(
            "project",
            PENDING,
            node("child", DONE),
            pending_until=datetime(2023, 4, 2, 6, 0),
            priority=3,
        )
    )
    child = root.children()[0]

    assert task_to_record(root) == {
        "name": "project",
        "id": str(root.get_id()),
        "status": "pending",
        "pending_until": "2023/04/02 06:00:00",
        "priority": 3,
        "children": [{"name": "child", "id": str(child.get_id()), "status": "done"}],
    }


def test_project_yaml_roundtrip_keeps_values_and_ids() -> None:
    root = build(
        node(
            "プロジェクト",
            TODO,
            node("a", PENDING, node("a1", DONE), pending_until=datetime(2023, 4, 2, 6, 0)),
            node("b", priority=-1),
            priority=10,
        )
    )

    text = dump_project_yaml(root)
    loaded = load_project_yaml(text).root()

    assert text.startswith("project:")
    assert "プロジェクト" in text
    assert loaded == root
    assert [t.get_id() for t in loaded.iter_subtree()] == [t.get_id() for t in root.iter_subtree()]


def test_project_yaml_without_project_key_loads_empty_task() -> None:
    root = load_project_yaml("something: else\n").root()

    assert root.get_name() == ""
    assert root.children() == []


def test_invalid_project_yaml_raises() -> None:
    with pytest.raises(ProjectLoadError):
        load_project_yaml("project: [unclosed", source="broken.yaml")
