"""
Database connection management.
Handles per-context connections, store access, initialization, and teardown.
"""

import os
import sqlite3
from flask import g, current_app


def open_connection(db_path: str) -> sqlite3.Connection:
    """
    Open a SQLite connection configured for the reservation store.

    Transactions are managed explicitly (see SqliteStore.transaction),
    so the connection runs in autocommit mode.

    Args:
        db_path: Path to the database file (or ':memory:')

    Returns:
        sqlite3.Connection: Database connection object
    """
    conn = sqlite3.connect(db_path, timeout=10, isolation_level=None)
    conn.row_factory = sqlite3.Row
    # Enable foreign key constraints
    conn.execute('PRAGMA foreign_keys = ON')
    # Enable WAL mode for better concurrency
    conn.execute('PRAGMA journal_mode = WAL')
    conn.execute('PRAGMA busy_timeout = 10000')
    return conn


def get_db():
    """
    Get the database connection for the current app context.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/gagebook.db')
        db_dir = os.path.dirname(db_path)
        if db_path != ':memory:' and db_dir:
            os.makedirs(db_dir, exist_ok=True)
        g.db = open_connection(db_path)
    return g.db


def get_store():
    """
    Get the entity store bound to the current app context connection.

    Returns:
        SqliteStore: Store wrapping get_db()
    """
    if 'store' not in g:
        from database.sqlite_store import SqliteStore
        g.store = SqliteStore(get_db())
    return g.store


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    g.pop('store', None)
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db(seed: bool = True):
    """
    Initialize database: drop existing tables, create new schema, insert seed data.
    WARNING: This will delete all existing data!

    Args:
        seed: Insert the demo users, companies, equipment and reservations
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    # Drop existing tables (in reverse order of dependencies)
    drop_tables(db)

    # Create all tables
    create_tables(db)

    # Create indexes
    create_indexes(db)

    if seed:
        seed_database(get_store())

    current_app.logger.info('Database initialized (seed=%s)', seed)
