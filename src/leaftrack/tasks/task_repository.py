# src/leaftrack/tasks/task_repository.py

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..core.clock import DEFAULT_MORNING_HOUR, EPOCH_MIN, get_next_morning_datetime
from ..errors import ProjectLoadError
from .leaf_extractor import extract_leaf_tasks_from_project
from .task_codec import dump_project_yaml, load_project_yaml
from .task_models import TaskStatus
from .task_tree import Task, TaskTree

logger = logging.getLogger(__name__)

PROJECT_FILE_NAME = "project.yaml"
MARKDOWN_DIR_NAME = "markdown"


@dataclass(slots=True)
class Project:
    tree: TaskTree
    project_dir_path: Path
    project_yaml_file_path: Path

    @property
    def root_task(self) -> Task:
        return self.tree.root()

    @property
    def priority(self) -> int:
        return self.root_task.get_priority()


class TaskRepository:
    """
    Directory-backed collection of project trees.

    Layout:
        <projects_dir>/<YYYYMMDD>-<name>/project.yaml
        <projects_dir>/<YYYYMMDD>-<name>/markdown/

    Every project.yaml found anywhere below projects_dir is one independent tree.
    Projects are kept sorted from lowest to highest priority after the priority
    queries run, so listings end with the most urgent project.
    """

    def __init__(self, projects_dir: str | Path, *, morning_hour: int = DEFAULT_MORNING_HOUR) -> None:
        self._projects_dir = Path(projects_dir)
        self._morning_hour = morning_hour
        self._projects: list[Project] = []
        self._last_synced_time: datetime = EPOCH_MIN

    @property
    def projects_dir(self) -> Path:
        return self._projects_dir

    def get_all_projects(self) -> list[Task]:
        return [p.root_task for p in self._projects]

    def get_last_synced_time(self) -> datetime:
        return self._last_synced_time

    # ---- persistence ----

    def load(self) -> None:
        """Load every project.yaml below projects_dir. Raises ProjectLoadError on unreadable files or invalid YAML."""
        if not self._projects_dir.exists():
            logger.info("Projects dir %s does not exist; nothing to load", self._projects_dir)
            return

        for dirpath, dirnames, filenames in os.walk(self._projects_dir):
            dirnames.sort()
            if PROJECT_FILE_NAME not in filenames:
                continue
            yaml_path = Path(dirpath) / PROJECT_FILE_NAME
            try:
                text = yaml_path.read_text("utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ProjectLoadError(f"cannot read {yaml_path}: {e}") from e
            tree = load_project_yaml(text, last_synced_time=self._last_synced_time, source=str(yaml_path))
            self._projects.append(
                Project(tree=tree, project_dir_path=Path(dirpath), project_yaml_file_path=yaml_path)
            )
            logger.debug("Loaded project %r from %s", tree.root().get_name(), yaml_path)

        logger.info("TaskRepository loaded %d projects from %s", len(self._projects), self._projects_dir)

    def save(self) -> None:
        for project in self._projects:
            text = dump_project_yaml(project.root_task)
            project.project_yaml_file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp = project.project_yaml_file_path.with_suffix(".tmp")
            tmp.write_text(text, "utf-8")
            os.replace(tmp, project.project_yaml_file_path)
        logger.info("TaskRepository saved %d projects", len(self._projects))

    # ---- clock ----

    def sync_clock(self, now: datetime) -> None:
        """Remember `now` for later loads and re-evaluate every loaded tree."""
        self._last_synced_time = now
        for project in self._projects:
            project.root_task.sync_clock(now)

    # ---- queries ----

    def _sort_by_priority(self) -> None:
        self._projects.sort(key=lambda p: p.priority)

    def get_highest_priority_project(self) -> Task | None:
        self._sort_by_priority()
        return self._projects[-1].root_task if self._projects else None

    def get_highest_priority_leaf_task_id(self) -> uuid.UUID | None:
        """First leaf of the most urgent project that has any actionable leaf."""
        self._sort_by_priority()
        for project in reversed(self._projects):
            leaves = extract_leaf_tasks_from_project(project.root_task)
            if leaves:
                return leaves[0].get_id()
        return None

    def get_by_id(self, task_id: uuid.UUID) -> Task | None:
        for project in self._projects:
            found = project.root_task.get_by_id(task_id)
            if found is not None:
                return found
        return None

    # ---- creation ----

    def start_new_project(self, project_name: str, *, is_deferred: bool = False) -> Task:
        """
        Create a project directory (with a markdown/ subdir) and register its root task.

        A deferred project is Pending until the next morning after the last sync.
        The project file is written on the next save().
        """
        tree = TaskTree.new(project_name)
        root = tree.root()
        root.sync_clock(self._last_synced_time)

        if is_deferred:
            root.set_pending_until(
                get_next_morning_datetime(self._last_synced_time, morning_hour=self._morning_hour)
            )
            root.set_orig_status(TaskStatus.PENDING)

        yyyymmdd = self._last_synced_time.strftime("%Y%m%d")
        dir_name = f"{yyyymmdd}-{project_name.replace('/', '-')}"
        project_dir_path = self._projects_dir / dir_name
        (project_dir_path / MARKDOWN_DIR_NAME).mkdir(parents=True, exist_ok=True)

        self._projects.append(
            Project(
                tree=tree,
                project_dir_path=project_dir_path,
                project_yaml_file_path=project_dir_path / PROJECT_FILE_NAME,
            )
        )
        logger.info("Started project %r in %s (deferred=%s)", project_name, project_dir_path, is_deferred)
        return root
