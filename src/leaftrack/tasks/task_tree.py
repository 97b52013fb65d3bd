# src/leaftrack/tasks/task_tree.py

"""
Arena-backed task tree.

Nodes live in a per-tree list and refer to each other by index:
- each node owns an ordered list of child indices (insertion order),
- each node keeps a non-owning parent index (None for the root).

`Task` is a lightweight handle (tree, index). Handles compare by value:
two handles are equal when their whole subtrees are equal attribute by
attribute, children in order. Task ids are ignored by that comparison.

Access discipline:
- structural edits (create_as_last_child, detach_insert_as_last_child_of)
  need the tree's HierarchyPermit, either passed in or acquired for the call;
- attribute reads and writes lock only the node's own attribute cell.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime

from ..errors import ContractViolation, HierarchyCycleError
from .task_models import TaskAttr, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Node:
    attr: TaskAttr
    parent: int | None
    children: list[int] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)


class HierarchyPermit:
    """
    Exclusive right to change the shape of one tree.

    Obtained from TaskTree.hierarchy_edit(); valid only inside that `with` block.
    """

    __slots__ = ("_tree", "_active")

    def __init__(self, tree: TaskTree) -> None:
        self._tree = tree
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def check(self, tree: TaskTree) -> None:
        if self._tree is not tree:
            raise ContractViolation("hierarchy permit belongs to another tree")
        if not self._active:
            raise ContractViolation("hierarchy permit was already released")


class TaskTree:
    """One project: a single-rooted tree of TaskAttr nodes."""

    def __init__(self, root_attr: TaskAttr) -> None:
        self._nodes: list[_Node | None] = [_Node(attr=root_attr.copy(), parent=None)]
        self._root_index = 0
        self._edit_lock = threading.Lock()
        self._edit_owner: int | None = None

    @classmethod
    def new(cls, name: str) -> TaskTree:
        return cls(TaskAttr(name=name))

    @classmethod
    def from_attr(cls, attr: TaskAttr) -> TaskTree:
        return cls(attr)

    def __len__(self) -> int:
        return sum(1 for n in self._nodes if n is not None)

    def __repr__(self) -> str:
        return f"TaskTree(root={self.root().get_name()!r}, size={len(self)})"

    def root(self) -> Task:
        return Task(self, self._root_index)

    @contextmanager
    def hierarchy_edit(self) -> Iterator[HierarchyPermit]:
        """
        Hold the tree's structural edit permit for the duration of the block.

        The permit is not reentrant: inside the block, pass it to the edits.
        """
        if self._edit_owner == threading.get_ident():
            raise ContractViolation("hierarchy permit already held by this thread; pass it explicitly")
        with self._edit_lock:
            self._edit_owner = threading.get_ident()
            permit = HierarchyPermit(self)
            try:
                yield permit
            finally:
                permit._active = False
                self._edit_owner = None

    @contextmanager
    def _editing(self, permit: HierarchyPermit | None) -> Iterator[None]:
        if permit is not None:
            permit.check(self)
            yield
            return
        with self.hierarchy_edit():
            yield

    # ---- node access ----

    def _node(self, index: int) -> _Node:
        node = self._nodes[index] if 0 <= index < len(self._nodes) else None
        if node is None:
            raise ContractViolation(f"stale task handle (index={index})")
        return node

    def _append_node(self, attr: TaskAttr, parent: int) -> int:
        index = len(self._nodes)
        self._nodes.append(_Node(attr=attr, parent=parent))
        self._node(parent).children.append(index)
        return index

    def _is_ancestor_or_self(self, candidate: int, index: int) -> bool:
        cur: int | None = index
        while cur is not None:
            if cur == candidate:
                return True
            cur = self._node(cur).parent
        return False

    def _iter_indices(self, start: int) -> Iterator[int]:
        # depth-first pre-order, left to right
        stack = [start]
        while stack:
            index = stack.pop()
            yield index
            stack.extend(reversed(self._node(index).children))

    def _copy_subtree_into(self, target: TaskTree, index: int, target_parent: int) -> int:
        node = self._node(index)
        with node.lock:
            attr = node.attr.copy()
        new_index = target._append_node(attr, target_parent)
        for child in list(node.children):
            self._copy_subtree_into(target, child, new_index)
        return new_index

    def _discard_subtree(self, index: int) -> None:
        for i in list(self._iter_indices(index)):
            self._nodes[i] = None


def _lock_order(*trees: TaskTree) -> list[TaskTree]:
    unique = {id(t): t for t in trees}
    return [unique[k] for k in sorted(unique)]


class Task:
    """Handle to one node of a TaskTree."""

    __slots__ = ("_tree", "_index")

    def __init__(self, tree: TaskTree, index: int) -> None:
        self._tree = tree
        self._index = index

    @classmethod
    def new(cls, name: str) -> Task:
        return TaskTree.new(name).root()

    @property
    def tree(self) -> TaskTree:
        return self._tree

    def _node(self) -> _Node:
        return self._tree._node(self._index)

    # ---- equality ----

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        if self.get_attr() != other.get_attr():
            return False
        mine = self.children()
        theirs = other.children()
        if len(mine) != len(theirs):
            return False
        return all(a == b for a, b in zip(mine, theirs))

    __hash__ = None  # type: ignore[assignment]

    def is_same_node(self, other: Task) -> bool:
        return self._tree is other._tree and self._index == other._index

    def __repr__(self) -> str:
        attr = self.get_attr()
        return (
            f"Task(name={attr.name!r}, status={attr.status.value}, "
            f"priority={attr.priority}, children={len(self._node().children)})"
        )

    # ---- navigation ----

    def parent(self) -> Task | None:
        parent = self._node().parent
        return None if parent is None else Task(self._tree, parent)

    def root(self) -> Task:
        return self._tree.root()

    def is_root(self) -> bool:
        return self._node().parent is None

    def children(self) -> list[Task]:
        return [Task(self._tree, i) for i in self._node().children]

    def has_children(self) -> bool:
        return bool(self._node().children)

    def iter_subtree(self) -> Iterator[Task]:
        for index in self._tree._iter_indices(self._index):
            yield Task(self._tree, index)

    def get_by_id(self, task_id: uuid.UUID) -> Task | None:
        for task in self.iter_subtree():
            if task.get_id() == task_id:
                return task
        return None

    # ---- structural edits ----

    def create_as_last_child(self, attr: TaskAttr, permit: HierarchyPermit | None = None) -> Task:
        tree = self._tree
        with tree._editing(permit):
            index = tree._append_node(attr.copy(), self._index)
        return Task(tree, index)

    def detach_insert_as_last_child_of(
        self,
        new_parent: Task,
        permit: HierarchyPermit | None = None,
        target_permit: HierarchyPermit | None = None,
    ) -> Task:
        """
        Move this subtree to the end of new_parent's children.

        Within one tree this is a true move and returns `self`.
        Across trees the subtree is copied into the target tree (ids preserved)
        and discarded from this one; handles into the old location go stale and
        the handle at the new location is returned.

        Raises HierarchyCycleError if new_parent is this node or a descendant of it.
        `permit` covers this tree, `target_permit` the target tree when it differs.
        """
        source = self._tree
        target = new_parent._tree

        if source is target:
            with source._editing(permit):
                return self._move_within_tree(new_parent)

        with contextlib.ExitStack() as stack:
            for tree in _lock_order(source, target):
                given = permit if tree is source else target_permit
                stack.enter_context(tree._editing(given))
            return self._move_across_trees(new_parent)

    def _move_within_tree(self, new_parent: Task) -> Task:
        tree = self._tree
        node = self._node()
        if tree._is_ancestor_or_self(self._index, new_parent._index):
            raise HierarchyCycleError(
                f"cannot move {node.attr.name!r} under itself or one of its descendants"
            )
        if node.parent is None:
            raise ContractViolation("the root of a tree cannot be detached")

        tree._node(node.parent).children.remove(self._index)
        tree._node(new_parent._index).children.append(self._index)
        node.parent = new_parent._index
        logger.debug("Moved task %s under %s", node.attr.id, tree._node(new_parent._index).attr.id)
        return self

    def _move_across_trees(self, new_parent: Task) -> Task:
        source = self._tree
        node = self._node()
        if node.parent is None:
            raise ContractViolation("the root of a tree cannot be detached")
        new_parent._node()

        new_index = source._copy_subtree_into(new_parent._tree, self._index, new_parent._index)
        source._node(node.parent).children.remove(self._index)
        source._discard_subtree(self._index)
        logger.debug("Moved task %s to another tree", node.attr.id)
        return Task(new_parent._tree, new_index)

    # ---- attributes ----

    def get_attr(self) -> TaskAttr:
        node = self._node()
        with node.lock:
            return node.attr.copy()

    def get_id(self) -> uuid.UUID:
        node = self._node()
        with node.lock:
            return node.attr.id

    def get_name(self) -> str:
        node = self._node()
        with node.lock:
            return node.attr.name

    def get_status(self) -> TaskStatus:
        node = self._node()
        with node.lock:
            return node.attr.status

    def get_orig_status(self) -> TaskStatus:
        node = self._node()
        with node.lock:
            return node.attr.orig_status

    def get_pending_until(self) -> datetime:
        node = self._node()
        with node.lock:
            return node.attr.pending_until

    def get_last_synced_time(self) -> datetime:
        node = self._node()
        with node.lock:
            return node.attr.last_synced_time

    def get_priority(self) -> int:
        node = self._node()
        with node.lock:
            return node.attr.priority

    def set_name(self, name: str) -> None:
        node = self._node()
        with node.lock:
            node.attr.name = name

    def set_orig_status(self, status: TaskStatus) -> None:
        node = self._node()
        with node.lock:
            node.attr.set_orig_status(status)

    def set_pending_until(self, pending_until: datetime) -> None:
        node = self._node()
        with node.lock:
            node.attr.set_pending_until(pending_until)

    def set_priority(self, priority: int) -> None:
        node = self._node()
        with node.lock:
            node.attr.priority = int(priority)

    def sync_clock(self, now: datetime) -> None:
        """Evaluate every status in this subtree against `now`."""
        for task in self.iter_subtree():
            node = task._node()
            with node.lock:
                node.attr.sync_clock(now)
