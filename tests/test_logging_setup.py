# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from leaftrack.logging_setup import LOG_FILE_NAME, _CliConsoleFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    logging.captureWarnings(False)


def test_console_filter_passes_app_records_at_any_level() -> None:
    f = _CliConsoleFilter()

    assert f.filter(_record("leaftrack.tasks.task_tree", logging.DEBUG))
    assert f.filter(_record("leaftrack", logging.INFO))


def test_console_filter_keeps_third_party_quiet_below_warning() -> None:
    f = _CliConsoleFilter()

    assert not f.filter(_record("yaml", logging.INFO))
    assert not f.filter(_record("leaftrackish", logging.INFO))
    assert f.filter(_record("py.warnings", logging.WARNING))


def test_setup_logging_writes_file_and_replaces_own_handlers(tmp_path: Path, restore_root_logger) -> None:
    root = restore_root_logger
    foreign = logging.NullHandler()
    root.addHandler(foreign)

    setup_logging(log_dir=tmp_path)
    log_file = setup_logging(log_dir=tmp_path)
    logging.getLogger("leaftrack.test").debug("hello file")

    assert log_file == tmp_path / LOG_FILE_NAME
    assert foreign in root.handlers
    assert sum(isinstance(h, logging.FileHandler) and h.baseFilename == str(log_file) for h in root.handlers) == 1

    for h in root.handlers:
        h.flush()
    assert "hello file" in log_file.read_text("utf-8")
