# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tasks_datastore.logging_setup import (
    _ConsoleFilter,
    level_from_name,
    log_file_path,
    setup_logging,
)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_levels() -> None:
    f = _ConsoleFilter()

    assert f.filter(_record("tasks_datastore.data.datastore", logging.DEBUG))
    assert not f.filter(_record("tasks_datastore.ui.lifecycle", logging.INFO))
    assert f.filter(_record("tasks_datastore.ui.lifecycle", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))
    # Prefix match is on the package, not on any name that starts alike.
    assert not f.filter(_record("tasks_datastore_extra", logging.INFO))


@pytest.mark.parametrize(
    ("name", "expected"),
    [("debug", logging.DEBUG), (" Warning ", logging.WARNING), ("nope", logging.INFO), (None, logging.INFO)],
)
def test_level_from_name(name, expected) -> None:
    assert level_from_name(name) == expected


def test_log_file_is_named_after_the_app(tmp_path: Path) -> None:
    assert log_file_path(tmp_path, "tasks") == tmp_path / "tasks.log"
    assert log_file_path(tmp_path, "my tasks/dev") == tmp_path / "my_tasks_dev.log"
    assert log_file_path(tmp_path, "...") == tmp_path / "tasks_datastore.log"


def test_setup_logging_writes_app_log(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(app_name="tasks-test", log_dir=tmp_path / "logs")
        logging.getLogger("tasks_datastore.test").debug("hello file")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / "logs" / "tasks-test.log"
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
