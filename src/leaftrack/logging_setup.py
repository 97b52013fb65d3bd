# src/leaftrack/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "leaftrack.log"

_CONSOLE_FMT = "%(levelname)s: %(message)s"
_FILE_FMT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"

# Marks handlers installed here so a second setup replaces only its own.
_OWNED = "_leaftrack_owned"


class _CliConsoleFilter(logging.Filter):
    """
    stdout carries command output, so stderr only gets what the user should see:
    leaftrack records at the handler level, everything else (third-party
    loggers, captured py.warnings) from WARNING up.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "leaftrack" or record.name.startswith("leaftrack."):
            return True
        return record.levelno >= logging.WARNING


def _owned(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _OWNED, True)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/leaftrack",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a terse stderr handler and a detailed file handler on the root logger.

    Safe to call more than once: handlers from an earlier call are replaced,
    handlers installed by anyone else are left alone. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in [h for h in root.handlers if getattr(h, _OWNED, False)]:
        root.removeHandler(h)
        h.close()

    console = _owned(logging.StreamHandler(sys.stderr))
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FMT))
    console.addFilter(_CliConsoleFilter())
    root.addHandler(console)

    file_handler = _owned(logging.FileHandler(str(log_file), encoding="utf-8"))
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(_FILE_FMT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
