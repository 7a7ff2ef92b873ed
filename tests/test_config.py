# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from tasks_datastore.config import Settings


def test_defaults(monkeypatch) -> None:
    for name in (
        "TASKS_APP_NAME",
        "TASKS_DATA_DIR",
        "TASKS_PREFERENCES_DB_PATH",
        "TASKS_LEGACY_PREFERENCES_PATH",
        "TASKS_LIVE_DATA_TIMEOUT",
        "TASKS_SEED_SAMPLE_TASKS",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert s.app_name == "tasks"
    assert s.data_dir == Path(".local/tasks")
    assert s.preferences_db_path == Path(".local/tasks") / "user_preferences.sqlite3"
    assert s.legacy_preferences_path == Path(".local/tasks") / "user_preferences.json"
    assert s.live_data_timeout_seconds == 5.0
    assert s.seed_sample_tasks is True


def test_env_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKS_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKS_PREFERENCES_DB_PATH", raising=False)
    monkeypatch.setenv("TASKS_LIVE_DATA_TIMEOUT", "not-a-number")
    monkeypatch.setenv("TASKS_SEED_SAMPLE_TASKS", "off")

    s = Settings.from_env()

    assert s.preferences_db_path == tmp_path / "user_preferences.sqlite3"
    assert s.live_data_timeout_seconds == 5.0
    assert s.seed_sample_tasks is False
