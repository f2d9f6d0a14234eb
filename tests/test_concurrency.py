"""
Concurrent booking tests.
Competing requests for the same equipment and window must yield exactly
one reservation, for both store implementations.
"""

import threading

from database import SqliteStore, open_connection
from models.reservation import create_batch_reservations, create_reservation

WORKERS = 8
BOOKING = {
    'equipment_id': 'eq-5', 'technician_id': 'user-2', 'company_id': 'comp-1',
    'pickup_date': '2030-03-01', 'return_date': '2030-03-04',
}


def run_concurrently(target):
    """Start WORKERS threads together and collect their results."""
    barrier = threading.Barrier(WORKERS)
    results = []
    lock = threading.Lock()

    def worker(index):
        barrier.wait()
        result = target(index)
        with lock:
            results.append(result)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(WORKERS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


class TestMemoryStoreConcurrency:

    def test_single_winner(self, store):
        results = run_concurrently(lambda i: create_reservation(store, dict(BOOKING)))

        assert len(results) == WORKERS
        assert sum(1 for r in results if r['success']) == 1
        assert all(r['kind'] == 'conflict' for r in results if not r['success'])
        assert len(store.reservations.query(equipment_id='eq-5')) == 1

    def test_overlapping_batches(self, store):
        """Batches sharing one item never both succeed."""
        def book(index):
            equipment_ids = ['eq-5', 'eq-6'] if index % 2 else ['eq-6', 'eq-7']
            return create_batch_reservations(store, equipment_ids, {
                k: v for k, v in BOOKING.items() if k != 'equipment_id'
            })

        results = run_concurrently(book)
        assert sum(1 for r in results if r['success']) == 1
        assert len(store.reservations.query(equipment_id='eq-6')) == 1


class TestSqliteStoreConcurrency:

    def test_single_winner_across_connections(self, app):
        """Each thread uses its own connection, as separate requests do."""
        db_path = app.config['DATABASE_PATH']

        def book(index):
            conn = open_connection(db_path)
            try:
                return create_reservation(SqliteStore(conn), dict(BOOKING))
            finally:
                conn.close()

        results = run_concurrently(book)
        assert sum(1 for r in results if r['success']) == 1

        conn = open_connection(db_path)
        try:
            assert len(SqliteStore(conn).reservations.query(equipment_id='eq-5')) == 1
        finally:
            conn.close()
