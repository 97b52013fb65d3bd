# src/leaftrack/cli/main.py

"""
CLI entrypoint.

Commands:
- leaves: actionable leaf tasks of every project, most urgent project last
- next:   the first leaf of the most urgent project that has one
- new:    start a project (optionally deferred to the next morning)
- free:   free/busy minutes from now until the end of the day
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, time

from .. import __version__
from ..config import get_settings
from ..core.state import AppState
from ..errors import ConfigError, ContractViolation, ProjectLoadError
from ..logging_setup import setup_logging
from ..tasks.leaf_extractor import extract_leaf_tasks_from_project
from .bootstrap import create_initial_state

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leaftrack",
        description="Task trees, actionable leaves and free time.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="cmd", required=False)

    sub.add_parser("leaves", help="List actionable leaf tasks per project.")
    sub.add_parser("next", help="Show the next task to work on.")

    new = sub.add_parser("new", help="Start a new project.")
    new.add_argument("name", help="Project name")
    new.add_argument("--defer", action="store_true", help="Keep it pending until the next morning")

    free = sub.add_parser("free", help="Free and busy minutes until the end of the day.")
    free.add_argument("--until", help="End time HH:MM (default: template end of day, else 23:59)")

    return parser


def cmd_leaves(state: AppState, args: argparse.Namespace) -> int:
    repo = state.task_repository
    # sorts projects from lowest to highest priority
    repo.get_highest_priority_project()
    for project in repo.get_all_projects():
        for leaf in extract_leaf_tasks_from_project(project):
            print(f"{project.get_name()}\t{leaf.get_name()}")
    return 0


def cmd_next(state: AppState, args: argparse.Namespace) -> int:
    repo = state.task_repository
    task_id = repo.get_highest_priority_leaf_task_id()
    task = repo.get_by_id(task_id) if task_id is not None else None
    if task is None:
        print("Nothing to do.")
        return 0
    print(f"{task.root().get_name()}\t{task.get_name()}\t{task.get_id()}")
    return 0


def cmd_new(state: AppState, args: argparse.Namespace) -> int:
    repo = state.task_repository
    root = repo.start_new_project(args.name, is_deferred=bool(args.defer))
    repo.save()
    print(f"Started {root.get_name()!r} ({root.get_status().value})")
    return 0


def _parse_hhmm(raw: str) -> time:
    try:
        return datetime.strptime(raw.strip(), "%H:%M").time()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected HH:MM, got {raw!r}") from None


def cmd_free(state: AppState, args: argparse.Namespace) -> int:
    now = state.now
    if args.until:
        end = datetime.combine(now.date(), _parse_hhmm(args.until))
    else:
        end = state.free_time.get_end_of_day(now.date()) or now.replace(hour=23, minute=59)

    if end <= now:
        print("The day is over.")
        return 0

    free = state.free_time.get_free_minutes(now, end)
    busy = state.free_time.get_busy_minutes(now, end)
    print(f"{now:%H:%M}-{end:%H:%M}\tfree={free}\tbusy={busy}")
    return 0


COMMANDS = {
    "leaves": cmd_leaves,
    "next": cmd_next,
    "new": cmd_new,
    "free": cmd_free,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    argv = list(argv) if argv is not None else list(sys.argv[1:])
    if not argv:
        argv = ["leaves"]
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.cmd)
    if handler is None:
        parser.error(f"Unknown command: {args.cmd}")
        return 2

    settings = get_settings()
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    setup_logging(log_dir=settings.data_dir, console_level=getattr(logging, level_name, logging.INFO))

    try:
        state = create_initial_state(settings=settings)
        return handler(state, args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
        return 2
    except (ConfigError, ProjectLoadError) as e:
        logger.error("%s", e)
        return 1
    except ContractViolation:
        logger.exception("Internal invariant broken while running %r", args.cmd)
        raise


if __name__ == "__main__":
    raise SystemExit(main())
