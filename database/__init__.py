"""
Database package for the equipment reservation system.

This package provides modular database operations:
- connection: Database connection management (get_db, get_store, close_db, init_db)
- schema: Table layout, creation and indexes
- seed: Initial seed data
- store: Repository/store contract shared by every backend
- sqlite_store / memory_store: the two store implementations
"""

from database.connection import get_db, get_store, close_db, init_db, open_connection
from database.schema import drop_tables, create_tables, create_indexes, TABLES
from database.seed import seed_database
from database.sqlite_store import SqliteStore
from database.memory_store import MemoryStore

__all__ = [
    # Connection
    'get_db',
    'get_store',
    'close_db',
    'init_db',
    'open_connection',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    'TABLES',
    # Seed
    'seed_database',
    # Stores
    'SqliteStore',
    'MemoryStore',
]
