"""In-process row store with parquet persistence and change subscriptions."""

from __future__ import annotations

import json
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager, nullcontext
from datetime import UTC, datetime
from pathlib import Path

import pandas as pd
from filelock import FileLock

from suggestion_box.config import StoreConfig

TABLES = ("users", "suggestions", "feedback", "reports", "quiz_settings")

# Rows in these tables are never updated or deleted once written
APPEND_ONLY = frozenset({"reports"})

# Columns holding nested values; stored as JSON text inside parquet
_JSON_COLUMNS: dict[str, tuple[str, ...]] = {"reports": ("topics", "raw_data")}

_LOCK_FILE = ".store.lock"

ChangeCallback = Callable[[str, dict], None]


def utc_now() -> str:
    return datetime.now(tz=UTC).isoformat()


def _clean(value):
    # pandas fills absent columns with NaN when rows have different keys
    if isinstance(value, float) and value != value:
        return None
    return value


class RowStore:
    """Opaque row store: read-all-of-kind, append, update, subscribe-on-change.

    Every table lives in memory as a list of dicts. When ``data_dir`` is given,
    each table is mirrored to ``<data_dir>/<table>.parquet``. Several processes
    (API server, dashboard, CLI) may share one ``data_dir``: writes re-read the
    table file and merge by ``id`` under a file lock, and reads pick up the file
    again whenever it changed on disk.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data_dir = data_dir
        self._tables: dict[str, list[dict]] = {name: [] for name in TABLES}
        self._stamps: dict[str, tuple[int, int, int] | None] = {name: None for name in TABLES}
        self._subscribers: dict[str, list[ChangeCallback]] = {name: [] for name in TABLES}
        self._lock = threading.RLock()
        self._file_lock: FileLock | None = None
        if data_dir is not None:
            data_dir.mkdir(parents=True, exist_ok=True)
            self._file_lock = FileLock(str(data_dir / _LOCK_FILE))
            for name in TABLES:
                self._tables[name] = self._load(name)

    @classmethod
    def from_config(cls, config: StoreConfig | None = None) -> RowStore:
        cfg = config or StoreConfig()
        return cls(data_dir=cfg.data_dir if cfg.persist else None)

    @property
    def data_dir(self) -> Path | None:
        return self._data_dir

    @contextmanager
    def transaction(self) -> Iterator[RowStore]:
        """Hold the store exclusively (threads and, when persisted, processes).

        Reads and writes inside the block see one consistent state, so a
        count-then-insert cannot interleave with another writer. Re-entrant.
        """
        with self._lock:
            with self._file_lock if self._file_lock is not None else nullcontext():
                yield self

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        order_by: str | None = None,
        descending: bool = False,
        **eq,
    ) -> list[dict]:
        """Return copies of all rows in ``table`` matching every ``column=value``."""
        self._check(table)
        with self._lock:
            self._refresh(table)
            matched = [
                dict(row)
                for row in self._tables[table]
                if all(row.get(k) == v for k, v in eq.items())
            ]
        if order_by is not None:
            matched.sort(key=lambda r: r.get(order_by) or "", reverse=descending)
        return matched

    def count(self, table: str, **eq) -> int:
        return len(self.select(table, **eq))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, table: str, row: dict) -> dict:
        """Append a row, assigning ``id`` and ``created_at`` when missing."""
        self._check(table)
        record = dict(row)
        record.setdefault("id", uuid.uuid4().hex)
        record.setdefault("created_at", utc_now())
        with self.transaction():
            self._refresh(table, force=True)
            self._tables[table].append(record)
            self._save(table)
        self._notify(table, dict(record))
        return dict(record)

    def update(self, table: str, row_id: str, **fields) -> dict:
        """Update columns of one row in place; append-only tables refuse."""
        self._check(table)
        if table in APPEND_ONLY:
            raise PermissionError(f"Table '{table}' is append-only")
        with self.transaction():
            self._refresh(table, force=True)
            for row in self._tables[table]:
                if row.get("id") == row_id:
                    row.update(fields)
                    updated = dict(row)
                    break
            else:
                raise KeyError(f"No row '{row_id}' in table '{table}'")
            self._save(table)
        self._notify(table, updated)
        return updated

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback(table, row)`` for writes; returns an unsubscribe function."""
        self._check(table)
        with self._lock:
            self._subscribers[table].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers[table]:
                    self._subscribers[table].remove(callback)

        return unsubscribe

    def _notify(self, table: str, row: dict) -> None:
        # Called after the write's own lock is released so callbacks may read the store
        with self._lock:
            callbacks = list(self._subscribers[table])
        for callback in callbacks:
            callback(table, row)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _check(self, table: str) -> None:
        if table not in self._tables:
            raise KeyError(f"Unknown table '{table}'")

    def _path(self, table: str) -> Path:
        assert self._data_dir is not None
        return self._data_dir / f"{table}.parquet"

    def _stamp(self, table: str) -> tuple[int, int, int] | None:
        path = self._path(table)
        if not path.exists():
            return None
        st = path.stat()
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    def _refresh(self, table: str, force: bool = False) -> None:
        """Merge rows another process wrote to the table file; disk wins per ``id``."""
        if self._data_dir is None:
            return
        stamp = self._stamp(table)
        if stamp is None or (not force and stamp == self._stamps[table]):
            return
        on_disk = self._read(table)
        seen = {row.get("id") for row in on_disk}
        local_only = [row for row in self._tables[table] if row.get("id") not in seen]
        self._tables[table] = on_disk + local_only
        self._stamps[table] = stamp

    def _save(self, table: str) -> None:
        if self._data_dir is None:
            return
        df = pd.DataFrame(self._tables[table])
        for col in _JSON_COLUMNS.get(table, ()):
            if col in df.columns:
                df[col] = df[col].map(json.dumps)
        path = self._path(table)
        # Readers outside the file lock must never see a half-written file
        tmp = path.with_name(path.name + ".tmp")
        df.to_parquet(tmp, index=False)
        tmp.replace(path)
        self._stamps[table] = self._stamp(table)

    def _read(self, table: str) -> list[dict]:
        df = pd.read_parquet(self._path(table))
        for col in _JSON_COLUMNS.get(table, ()):
            if col in df.columns:
                df[col] = df[col].map(lambda v: json.loads(v) if isinstance(v, str) else v)
        return [
            {k: _clean(v) for k, v in record.items()}
            for record in df.astype(object).to_dict("records")
        ]

    def _load(self, table: str) -> list[dict]:
        path = self._path(table)
        self._stamps[table] = self._stamp(table)
        if self._stamps[table] is None:
            return []
        rows = self._read(table)
        print(f"[store] loaded {len(rows)} {table} rows ← {path}")
        return rows
