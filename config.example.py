# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKS_APP_NAME": "App display name (default: tasks).",
    "TASKS_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TASKS_DATA_DIR": "Local data directory (default: .local/tasks).",
    "TASKS_PREFERENCES_DB_PATH": (
        "Preferences SQLite path (default: <data_dir>/user_preferences.sqlite3)."
    ),
    "TASKS_LEGACY_PREFERENCES_PATH": (
        "Legacy JSON preferences migrated on first start "
        "(default: <data_dir>/user_preferences.json)."
    ),
    # UI
    "TASKS_LIVE_DATA_TIMEOUT": (
        "Seconds the UI model keeps collecting after the last screen stops (default: 5)."
    ),
    "TASKS_SEED_SAMPLE_TASKS": "Start with the sample task list (true/false, default: true).",
}
