"""
Entity store contract.

A store bundles one repository per entity table (users, companies,
equipment, reservations) and a transaction() context manager. Domain
modules only talk to this interface, so the same logic runs against
SqliteStore in the application and MemoryStore in tests.

Repository capabilities:
    find(record_id)                  -> dict or None
    insert(record)                   -> dict (stored copy, id assigned if missing)
    update(record_id, changes)       -> dict or None
    delete(record_id)                -> bool
    delete_where(**match)            -> int (rows removed)
    query(where=None, order_by=None, **match) -> list of dicts
    exists(**match)                  -> bool

`match` compares columns for equality; columns listed as 'nocase' in
database.schema.TABLES compare case-insensitively. `where` is an optional
Python predicate applied after the match.
"""

import uuid
from typing import Callable, Iterable, Optional

from database.schema import TABLES


ENTITY_TABLES = ('users', 'companies', 'equipment', 'reservations')


class Repository:
    """Addressable record collection for one entity table."""

    def __init__(self, table: str):
        self.table = table
        self.table_def = TABLES[table]
        self.columns = self.table_def['columns']

    def new_id(self) -> str:
        """Generate an opaque record id with the table prefix (e.g. res-1a2b...)."""
        return f"{self.table_def['prefix']}-{uuid.uuid4().hex[:12]}"

    def prepare(self, record: dict) -> dict:
        """Return a full row: known columns only, defaults filled, id assigned."""
        defaults = self.table_def['defaults']
        row = {col: record.get(col, defaults.get(col)) for col in self.columns}
        if not row['id']:
            row['id'] = self.new_id()
        for col in self.table_def['booleans']:
            row[col] = bool(row[col])
        return row

    def changes_for(self, changes: dict) -> dict:
        """Filter an update payload to writable columns (never the id)."""
        return {k: v for k, v in changes.items() if k in self.columns and k != 'id'}

    def find(self, record_id: str) -> Optional[dict]:
        raise NotImplementedError

    def insert(self, record: dict) -> dict:
        raise NotImplementedError

    def update(self, record_id: str, changes: dict) -> Optional[dict]:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

    def delete_where(self, **match) -> int:
        raise NotImplementedError

    def query(self, where: Callable[[dict], bool] = None,
              order_by: Iterable[str] = None, **match) -> list:
        raise NotImplementedError

    def exists(self, **match) -> bool:
        return bool(self.query(**match))


class Store:
    """Bundle of entity repositories sharing one transaction scope."""

    def __init__(self, repositories: dict):
        self._repositories = repositories
        self.users = repositories['users']
        self.companies = repositories['companies']
        self.equipment = repositories['equipment']
        self.reservations = repositories['reservations']

    def transaction(self):
        """
        Exclusive, atomic write unit.

        Re-entrant: nested calls join the outermost transaction. Any
        exception leaving the outermost block undoes every write made in it.
        """
        raise NotImplementedError
