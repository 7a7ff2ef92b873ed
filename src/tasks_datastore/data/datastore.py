# src/tasks_datastore/data/datastore.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import sqlite3
from collections.abc import AsyncIterator, Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, TypeVar

from ..core.flow import StateFlow
from ..core.ports import DataMigration

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageReadError(OSError):
    """The preferences file could not be read (missing table, corrupt file, bad JSON...)."""


@dataclass(frozen=True)
class PreferencesKey(Generic[T]):
    name: str
    kind: type


def _key_name(key: PreferencesKey[Any] | str) -> str:
    return key.name if isinstance(key, PreferencesKey) else key


def matches_kind(value: Any, kind: type) -> bool:
    # bool is an int subclass; keep the two apart.
    if isinstance(value, bool) and kind is not bool:
        return False
    return isinstance(value, kind)


class Preferences(Mapping[str, Any]):
    """Immutable snapshot of the key-value store."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __getitem__(self, key: PreferencesKey[Any] | str) -> Any:
        return self._values[_key_name(key)]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, PreferencesKey):
            key = key.name
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

    def get(self, key: PreferencesKey[Any] | str, default: Any = None) -> Any:
        return self._values.get(_key_name(key), default)

    def to_mutable(self) -> MutablePreferences:
        return MutablePreferences(self._values)


class MutablePreferences(Preferences):
    """Editable copy handed to PreferencesDataStore.edit() transforms."""

    def __setitem__(self, key: PreferencesKey[Any] | str, value: Any) -> None:
        if isinstance(key, PreferencesKey) and not matches_kind(value, key.kind):
            raise TypeError(
                f"Preference {key.name!r} expects {key.kind.__name__}, got {type(value).__name__}"
            )
        self._values[_key_name(key)] = value

    def __delitem__(self, key: PreferencesKey[Any] | str) -> None:
        del self._values[_key_name(key)]

    def remove(self, key: PreferencesKey[Any] | str) -> None:
        self._values.pop(_key_name(key), None)

    def clear(self) -> None:
        self._values.clear()

    def freeze(self) -> Preferences:
        return Preferences(self._values)


def empty_preferences() -> Preferences:
    return Preferences()


class PreferencesDataStore:
    """
    SQLite-backed key-value preferences store.

    - data() emits the current snapshot, then every committed one (latest wins)
    - edit() is an atomic read-modify-write; edits are serialized per store
    - migrations run once, on first access, under the edit lock

    Values are stored JSON-encoded, one row per key.
    """

    def __init__(
        self,
        db_path: str | Path = "user_preferences.sqlite3",
        *,
        migrations: Iterable[DataMigration] = (),
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._migrations = list(migrations)
        self._lock = asyncio.Lock()
        self._state: StateFlow[Preferences] | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )

    def _read_all(self, conn: sqlite3.Connection) -> Preferences:
        try:
            self._ensure_schema(conn)
            rows = conn.execute("SELECT key, value FROM preferences").fetchall()
            return Preferences({str(row["key"]): json.loads(row["value"]) for row in rows})
        except (sqlite3.Error, ValueError) as e:
            raise StorageReadError(f"Failed to read preferences from {self._db_path}: {e}") from e

    @staticmethod
    def _write_diff(conn: sqlite3.Connection, old: Preferences, new: Preferences) -> bool:
        changed = False
        for key, value in new.items():
            if key in old and type(old[key]) is type(value) and old[key] == value:
                continue
            conn.execute(
                "INSERT INTO preferences (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, json.dumps(value, ensure_ascii=False)),
            )
            changed = True
        for key in old:
            if key not in new:
                conn.execute("DELETE FROM preferences WHERE key = ?", (key,))
                changed = True
        return changed

    def _transaction(
        self, transform: Callable[[Preferences], Preferences]
    ) -> tuple[Preferences, bool]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageReadError(f"Failed to open preferences at {self._db_path}: {e}") from e
        try:
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise StorageReadError(f"Failed to lock preferences at {self._db_path}: {e}") from e
            try:
                current = self._read_all(conn)
                updated = transform(current)
                changed = self._write_diff(conn, current, updated)
                conn.execute("COMMIT")
            except BaseException:
                with contextlib.suppress(sqlite3.Error):
                    conn.execute("ROLLBACK")
                raise
            return updated, changed
        finally:
            conn.close()

    def _run_migrations(self, current: Preferences) -> Preferences:
        done: list[DataMigration] = []
        for migration in self._migrations:
            if not migration.should_migrate(current):
                continue
            current, _ = self._transaction(migration.migrate)
            done.append(migration)
            logger.info("Preferences migration applied: %s", type(migration).__name__)
        for migration in done:
            try:
                migration.cleanup()
            except Exception:
                logger.exception("Preferences migration cleanup failed: %s", type(migration).__name__)
        return current

    async def _load_locked(self) -> StateFlow[Preferences]:
        if self._state is None:
            current, _ = self._transaction(lambda prefs: prefs)
            current = self._run_migrations(current)
            self._state = StateFlow(current)
            logger.info("PreferencesDataStore ready db=%s keys=%d", self._db_path, len(current))
        return self._state

    # ---- public API ----

    async def data(self) -> AsyncIterator[Preferences]:
        """Current snapshot, then every committed one. Raises StorageReadError on read failure."""
        async with self._lock:
            state = await self._load_locked()
        async for snapshot in state:
            yield snapshot

    async def edit(self, transform: Callable[[MutablePreferences], None]) -> Preferences:
        """
        Atomically apply `transform` to a mutable copy of the stored preferences.

        Concurrent edits run one after another, each against the result of the
        previous one. If `transform` raises, nothing is written.
        """

        def apply(current: Preferences) -> Preferences:
            mutable = current.to_mutable()
            transform(mutable)
            return mutable.freeze()

        async with self._lock:
            state = await self._load_locked()
            updated, changed = self._transaction(apply)
            if changed or updated != state.value:
                state.set(updated)
                logger.debug("Preferences updated keys=%s", sorted(updated))
            return updated


class LegacyPreferencesMigration:
    """
    Move keys from a legacy flat JSON preferences file into the store.

    Keys already present in the store are not overwritten. Typed keys only
    accept values of their kind; anything else is logged and dropped. After a
    successful migration the moved keys are removed from the legacy file; the
    file is deleted once empty.
    """

    def __init__(
        self,
        path: str | Path,
        keys: Iterable[PreferencesKey[Any] | str] | None = None,
    ) -> None:
        self._path = Path(path)
        self._kinds: dict[str, type | None] | None = None
        if keys is not None:
            self._kinds = {
                _key_name(k): (k.kind if isinstance(k, PreferencesKey) else None) for k in keys
            }
        self._keys = set(self._kinds) if self._kinds is not None else None

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Legacy preferences unreadable, skipping: %s", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            return {}
        if self._keys is None:
            return data
        return {k: v for k, v in data.items() if k in self._keys}

    def _accepts(self, key: str, value: Any) -> bool:
        kind = self._kinds.get(key) if self._kinds is not None else None
        if kind is None or matches_kind(value, kind):
            return True
        logger.warning(
            "Legacy preference %r has type %s, expected %s; dropped",
            key,
            type(value).__name__,
            kind.__name__,
        )
        return False

    def should_migrate(self, current: Preferences) -> bool:
        return bool(self._load())

    def migrate(self, current: Preferences) -> Preferences:
        mutable = current.to_mutable()
        for key, value in self._load().items():
            if key not in current and self._accepts(key, value):
                mutable[key] = value
        return mutable.freeze()

    def cleanup(self) -> None:
        if not self._path.exists():
            return
        data = json.loads(self._path.read_text("utf-8"))
        if not isinstance(data, dict):
            return
        remaining = {
            k: v for k, v in data.items() if self._keys is not None and k not in self._keys
        }
        if not remaining:
            self._path.unlink()
            logger.info("Legacy preferences removed: %s", self._path)
            return
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(remaining, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
