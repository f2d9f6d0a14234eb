"""
SQLite-backed entity store.
Durable implementation of the store contract used by the application.
"""

import sqlite3
from contextlib import contextmanager
from typing import Callable, Iterable, Optional

from database.store import ENTITY_TABLES, Repository, Store


def _quote(column: str) -> str:
    # "range" is an SQLite keyword
    return f'"{column}"'


class SqliteRepository(Repository):
    """Repository over one SQLite table."""

    def __init__(self, table: str, conn: sqlite3.Connection):
        super().__init__(table)
        self.conn = conn
        self._select = 'SELECT {cols} FROM {table}'.format(
            cols=', '.join(_quote(c) for c in self.columns), table=table
        )

    def _to_record(self, row) -> dict:
        record = dict(row)
        for col in self.table_def['booleans']:
            record[col] = bool(record[col])
        return record

    def _where_clause(self, match: dict) -> tuple:
        conditions = []
        params = []
        for column, value in match.items():
            if column not in self.columns:
                raise KeyError(f'Unknown column {self.table}.{column}')
            if value is None:
                conditions.append(f'{_quote(column)} IS NULL')
            else:
                conditions.append(f'{_quote(column)} = ?')
                params.append(value)
        clause = ' WHERE ' + ' AND '.join(conditions) if conditions else ''
        return clause, params

    def find(self, record_id: str) -> Optional[dict]:
        row = self.conn.execute(f'{self._select} WHERE id = ?', (record_id,)).fetchone()
        return self._to_record(row) if row else None

    def insert(self, record: dict) -> dict:
        row = self.prepare(record)
        columns = list(row.keys())
        self.conn.execute(
            'INSERT INTO {table} ({cols}) VALUES ({marks})'.format(
                table=self.table,
                cols=', '.join(_quote(c) for c in columns),
                marks=', '.join('?' * len(columns)),
            ),
            [row[c] for c in columns],
        )
        return self.find(row['id'])

    def update(self, record_id: str, changes: dict) -> Optional[dict]:
        changes = self.changes_for(changes)
        if changes:
            assignments = ', '.join(f'{_quote(c)} = ?' for c in changes)
            cursor = self.conn.execute(
                f'UPDATE {self.table} SET {assignments} WHERE id = ?',
                list(changes.values()) + [record_id],
            )
            if cursor.rowcount == 0:
                return None
        return self.find(record_id)

    def delete(self, record_id: str) -> bool:
        cursor = self.conn.execute(f'DELETE FROM {self.table} WHERE id = ?', (record_id,))
        return cursor.rowcount > 0

    def delete_where(self, **match) -> int:
        clause, params = self._where_clause(match)
        cursor = self.conn.execute(f'DELETE FROM {self.table}{clause}', params)
        return cursor.rowcount

    def query(self, where: Callable[[dict], bool] = None,
              order_by: Iterable[str] = None, **match) -> list:
        clause, params = self._where_clause(match)
        sql = self._select + clause
        if order_by:
            sql += ' ORDER BY ' + ', '.join(_quote(c) for c in order_by) + ', rowid'
        else:
            sql += ' ORDER BY rowid'
        records = [self._to_record(row) for row in self.conn.execute(sql, params).fetchall()]
        if where is not None:
            records = [r for r in records if where(r)]
        return records


class SqliteStore(Store):
    """Store over a single SQLite connection."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._depth = 0
        super().__init__({name: SqliteRepository(name, conn) for name in ENTITY_TABLES})

    @contextmanager
    def transaction(self):
        """
        BEGIN IMMEDIATE takes the database write lock up front, so a
        check-then-write sequence cannot interleave with another writer,
        even one in a different process.
        """
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self.conn.execute('BEGIN IMMEDIATE')
        self._depth = 1
        try:
            yield self
        except BaseException:
            self.conn.execute('ROLLBACK')
            raise
        else:
            self.conn.execute('COMMIT')
        finally:
            self._depth = 0
