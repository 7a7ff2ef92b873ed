# src/tasks_datastore/logging_setup.py

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterable
from pathlib import Path

PACKAGE = __name__.partition(".")[0]

# Stream plumbing logs every subscribe/cancel; console only shows its problems.
QUIET_LOGGERS = (f"{PACKAGE}.ui.lifecycle",)

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleFilter(logging.Filter):
    """App logs pass; quiet loggers need WARNING+, everything else ERROR+."""

    def __init__(self, package: str = PACKAGE, quiet: Iterable[str] = QUIET_LOGGERS) -> None:
        super().__init__()
        self._package = package
        self._quiet = tuple(quiet)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(self._quiet):
            return record.levelno >= logging.WARNING
        if name == self._package or name.startswith(self._package + "."):
            return True
        return record.levelno >= logging.ERROR


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def log_file_path(log_dir: str | Path, app_name: str) -> Path:
    stem = re.sub(r"[^A-Za-z0-9._-]+", "_", app_name).strip("._") or PACKAGE
    return Path(log_dir) / f"{stem}.log"


def setup_logging(
    *,
    app_name: str,
    log_dir: str | Path,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a full file log named after the app.

    Replaces any handlers already on the root logger and routes warnings.warn()
    into logging. Returns the log file path.
    """
    log_file = log_file_path(log_dir, app_name)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
