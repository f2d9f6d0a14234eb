"""
In-memory entity store.
Same contract as SqliteStore; used by the domain tests and for scratch data.
"""

import copy
import threading
from contextlib import contextmanager
from typing import Callable, Iterable, Optional

from database.store import ENTITY_TABLES, Repository, Store


class MemoryRepository(Repository):
    """Repository over an insertion-ordered dict of rows."""

    def __init__(self, table: str, lock: threading.RLock):
        super().__init__(table)
        self._lock = lock
        self.rows = {}

    def _normalize(self, column: str, value):
        if column in self.table_def['nocase'] and isinstance(value, str):
            return value.casefold()
        return value

    def _matches(self, row: dict, match: dict) -> bool:
        for column, value in match.items():
            if column not in self.columns:
                raise KeyError(f'Unknown column {self.table}.{column}')
            if self._normalize(column, row[column]) != self._normalize(column, value):
                return False
        return True

    def find(self, record_id: str) -> Optional[dict]:
        with self._lock:
            row = self.rows.get(record_id)
            return dict(row) if row else None

    def insert(self, record: dict) -> dict:
        row = self.prepare(record)
        with self._lock:
            if row['id'] in self.rows:
                raise KeyError(f"Duplicate id {self.table}.{row['id']}")
            self.rows[row['id']] = row
            return dict(row)

    def update(self, record_id: str, changes: dict) -> Optional[dict]:
        changes = self.changes_for(changes)
        with self._lock:
            row = self.rows.get(record_id)
            if row is None:
                return None
            row.update(changes)
            for col in self.table_def['booleans']:
                row[col] = bool(row[col])
            return dict(row)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self.rows.pop(record_id, None) is not None

    def delete_where(self, **match) -> int:
        with self._lock:
            doomed = [rid for rid, row in self.rows.items() if self._matches(row, match)]
            for rid in doomed:
                del self.rows[rid]
            return len(doomed)

    def query(self, where: Callable[[dict], bool] = None,
              order_by: Iterable[str] = None, **match) -> list:
        with self._lock:
            records = [dict(row) for row in self.rows.values() if self._matches(row, match)]
        if where is not None:
            records = [r for r in records if where(r)]
        if order_by:
            columns = list(order_by)
            records.sort(key=lambda r: tuple(
                (r[c] is not None, self._normalize(c, r[c]) if r[c] is not None else '')
                for c in columns
            ))
        return records


class MemoryStore(Store):
    """Thread-safe store; one re-entrant lock guards every table."""

    def __init__(self):
        self._lock = threading.RLock()
        self._depth = 0
        super().__init__({name: MemoryRepository(name, self._lock) for name in ENTITY_TABLES})

    @contextmanager
    def transaction(self):
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snapshot = {name: copy.deepcopy(repo.rows) for name, repo in self._repositories.items()}
            self._depth = 1
            try:
                yield self
            except BaseException:
                for name, rows in snapshot.items():
                    self._repositories[name].rows = rows
                raise
            finally:
                self._depth = 0
