"""
Tests for reservation availability functions.
"""

from datetime import date

from models.reservation_availability import (
    check_equipment_availability_bulk, dates_overlap, find_conflicts,
    get_available_equipment, get_booked_equipment_ids, has_conflict,
)


class TestDatesOverlap:
    """Inclusive overlap predicate."""

    def test_shared_boundary_day_overlaps(self):
        """A return on the 30th blocks a pickup on the 30th."""
        assert dates_overlap('2024-07-30', '2024-07-31', '2024-07-28', '2024-07-30') is True

    def test_adjacent_windows_do_not_overlap(self):
        assert dates_overlap('2024-07-31', '2024-08-01', '2024-07-28', '2024-07-30') is False

    def test_containment(self):
        assert dates_overlap('2024-07-29', '2024-07-29', '2024-07-28', '2024-07-30') is True
        assert dates_overlap('2024-07-01', '2024-08-30', '2024-07-28', '2024-07-30') is True

    def test_accepts_date_objects(self):
        assert dates_overlap(date(2024, 7, 30), date(2024, 7, 30), '2024-07-28', '2024-07-30')


class TestHasConflict:
    """Conflict lookup against stored reservations (res-1: eq-1, 07-28..07-30)."""

    def test_boundary_day_conflicts(self, store):
        assert has_conflict(store, 'eq-1', '2024-07-30', '2024-07-31') is True

    def test_day_after_is_free(self, store):
        assert has_conflict(store, 'eq-1', '2024-07-31', '2024-08-02') is False

    def test_other_equipment_unaffected(self, store):
        assert has_conflict(store, 'eq-5', '2024-07-28', '2024-07-30') is False

    def test_exclude_self(self, store):
        """An update does not conflict with the reservation being edited."""
        assert has_conflict(store, 'eq-1', '2024-07-28', '2024-07-30',
                            exclude_reservation_id='res-1') is False

    def test_find_conflicts_returns_reservations(self, store):
        conflicts = find_conflicts(store, 'eq-1', '2024-07-01', '2024-07-29')
        assert [c['id'] for c in conflicts] == ['res-1']

    def test_pure(self, store):
        """Checking availability does not modify the store."""
        before = store.reservations.query()
        has_conflict(store, 'eq-1', '2024-07-30', '2024-07-31')
        assert store.reservations.query() == before


class TestBulkAvailability:
    """Multi-equipment availability check."""

    def test_all_available(self, store):
        result = check_equipment_availability_bulk(store, ['eq-5', 'eq-6'], '2024-07-28', '2024-07-30')
        assert result == {'all_available': True, 'unavailable': []}

    def test_reports_gage_ids(self, store):
        result = check_equipment_availability_bulk(
            store, ['eq-1', 'eq-3', 'eq-5'], '2024-07-30', '2024-07-30'
        )
        assert result['all_available'] is False
        assert {u['gage_id'] for u in result['unavailable']} == {'G-1001', 'G-1003'}


class TestDailySnapshot:
    """Equipment booked / free on a given day."""

    def test_booked_ids(self, store):
        assert get_booked_equipment_ids(store, '2024-07-29') == {'eq-1', 'eq-3'}

    def test_available_equipment(self, store):
        available = get_available_equipment(store, '2024-07-29')
        ids = [e['id'] for e in available]
        assert 'eq-1' not in ids
        assert 'eq-3' not in ids
        assert len(ids) == 5
        assert [e['gage_id'] for e in available] == sorted(e['gage_id'] for e in available)
