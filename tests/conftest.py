"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest

os.environ['FLASK_ENV'] = 'test'

ADMIN_ID = 'user-1'
TECH_ID = 'user-2'
OTHER_TECH_ID = 'user-3'


@pytest.fixture
def app(tmp_path):
    """Create test application with an isolated, seeded database file."""
    from app import create_app
    from database import init_db

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = str(tmp_path / 'gagebook_test.db')

    with app.app_context():
        init_db(seed=True)

    # No context stays pushed: each request gets its own app context,
    # connection and Flask-Login user.
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def sqlite_store(app):
    """SqliteStore for the test database, inside an app context."""
    from database import get_store

    with app.app_context():
        yield get_store()


class AuthClient:
    """Test client wrapper that sends the authenticated-user header."""

    def __init__(self, client, header, user_id):
        self.client = client
        self.headers = {header: user_id}

    def _call(self, method, url, **kwargs):
        headers = {**self.headers, **kwargs.pop('headers', {})}
        return getattr(self.client, method)(url, headers=headers, **kwargs)

    def get(self, url, **kwargs):
        return self._call('get', url, **kwargs)

    def post(self, url, **kwargs):
        return self._call('post', url, **kwargs)

    def put(self, url, **kwargs):
        return self._call('put', url, **kwargs)

    def delete(self, url, **kwargs):
        return self._call('delete', url, **kwargs)


@pytest.fixture
def admin_client(app, client):
    """Client authenticated as the seeded admin."""
    return AuthClient(client, app.config['AUTH_USER_HEADER'], ADMIN_ID)


@pytest.fixture
def tech_client(app, client):
    """Client authenticated as a seeded technician."""
    return AuthClient(client, app.config['AUTH_USER_HEADER'], TECH_ID)


@pytest.fixture
def store():
    """Fresh in-memory store holding the seed data."""
    from database import MemoryStore, seed_database

    memory_store = MemoryStore()
    seed_database(memory_store)
    return memory_store


@pytest.fixture
def empty_store():
    """Fresh in-memory store with no records."""
    from database import MemoryStore

    return MemoryStore()
