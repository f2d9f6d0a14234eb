"""
Tests for company management.
"""

from models.company import (
    bulk_upsert_companies, create_company, delete_company, list_companies, update_company,
)


class TestCompany:

    def test_list_sorted(self, store):
        names = [c['name'] for c in list_companies(store)]
        assert names == ['Future Systems', 'Global Tech Inc.', 'Innovate Solutions']

    def test_create(self, store):
        result = create_company(store, {'name': '  Precision Labs  '})
        assert result['success'] is True
        assert result['company']['name'] == 'Precision Labs'
        assert result['company']['id'].startswith('comp-')

    def test_create_duplicate_case_insensitive(self, store):
        result = create_company(store, {'name': 'GLOBAL TECH INC.'})
        assert result['kind'] == 'uniqueness'

    def test_create_requires_name(self, store):
        assert create_company(store, {'name': ' '})['kind'] == 'validation'

    def test_rename(self, store):
        result = update_company(store, {'id': 'comp-3', 'name': 'Future Systems LLC'})
        assert result['company']['name'] == 'Future Systems LLC'

    def test_rename_same_name_different_case(self, store):
        """Renaming a company to its own name in another case is allowed."""
        assert update_company(store, {'id': 'comp-3', 'name': 'FUTURE SYSTEMS'})['success'] is True

    def test_rename_conflict(self, store):
        assert update_company(store, {'id': 'comp-3', 'name': 'Innovate Solutions'})['kind'] == 'uniqueness'

    def test_delete_guarded(self, store):
        """A company referenced by reservations cannot be deleted."""
        result = delete_company(store, 'comp-1')
        assert result['success'] is False
        assert result['kind'] == 'in_use'
        assert store.companies.find('comp-1') is not None

    def test_delete_unreferenced(self, store):
        created = create_company(store, {'name': 'Temp Co'})['company']
        assert delete_company(store, created['id'])['success'] is True
        assert store.companies.find(created['id']) is None

    def test_delete_unknown(self, store):
        assert delete_company(store, 'comp-missing')['kind'] == 'not_found'


class TestBulkUpsertCompanies:

    def test_upsert(self, store):
        result = bulk_upsert_companies(store, [
            {'name': 'global tech inc.'},
            {'name': 'New Client'},
            {'name': ''},
        ])
        assert result['created_count'] == 1
        assert result['updated_count'] == 1
        assert len(result['errors']) == 1
        assert len(store.companies.query()) == 4
        assert store.companies.find('comp-1')['name'] == 'global tech inc.'
