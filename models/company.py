"""
Company data access functions.
Handles client companies that reservations are booked for.
"""

import logging

from models.errors import (
    NotFoundError, ReferenceGuardError, UniquenessError, ValidationError,
    returns_result,
)
from utils.messages import get_message
from utils.validators import sanitize_input

logger = logging.getLogger(__name__)


def _clean_name(name) -> str:
    name = sanitize_input(name, 200)
    if not name:
        raise ValidationError(get_message('import_missing_name'), field='name')
    return name


def _ensure_unique_name(store, name: str, exclude_id: str = None):
    for other in store.companies.query(name=name):
        if other['id'] != exclude_id:
            raise UniquenessError(get_message('company_exists', name=name), field='name')


def list_companies(store) -> list:
    """List companies ordered by name."""
    return store.companies.query(order_by=('name',))


def get_company(store, company_id: str):
    """Get company by ID, or None."""
    return store.companies.find(company_id)


@returns_result
def create_company(store, data: dict) -> dict:
    """
    Create a company.

    Args:
        store: Entity store
        data: {'name'}

    Returns:
        Result dict with 'company'
    """
    name = _clean_name(data.get('name'))
    with store.transaction():
        _ensure_unique_name(store, name)
        record = store.companies.insert({'name': name})
    return {'message': get_message('company_created'), 'company': record}


@returns_result
def update_company(store, data: dict) -> dict:
    """Rename a company; the new name must stay unique."""
    name = _clean_name(data.get('name'))
    with store.transaction():
        company = store.companies.find(data.get('id')) if data.get('id') else None
        if company is None:
            raise NotFoundError(get_message('company_not_found'))
        _ensure_unique_name(store, name, exclude_id=company['id'])
        record = store.companies.update(company['id'], {'name': name})
    return {'message': get_message('company_updated'), 'company': record}


@returns_result
def delete_company(store, company_id: str) -> dict:
    """Delete a company unless reservations still reference it."""
    with store.transaction():
        if not company_id or store.companies.find(company_id) is None:
            raise NotFoundError(get_message('company_not_found'))
        if store.reservations.exists(company_id=company_id):
            logger.info(f'Refused to delete company {company_id}: referenced by reservations')
            raise ReferenceGuardError(get_message('company_has_reservations'))
        store.companies.delete(company_id)
    return {'message': get_message('company_deleted'), 'id': company_id}


@returns_result
def bulk_upsert_companies(store, rows: list) -> dict:
    """
    Create or update companies from imported rows.

    Rows are matched on case-insensitive name; a matched row rewrites the
    stored name with the imported spelling. Bad rows are reported, never fatal.

    Args:
        store: Entity store
        rows: List of dicts with a 'name' key

    Returns:
        Result dict with 'created_count', 'updated_count', 'errors'
        ([{'row_data', 'message'}])
    """
    created_count = 0
    updated_count = 0
    errors = []

    with store.transaction():
        for row in rows:
            name = sanitize_input(row.get('name'), 200)
            if not name:
                errors.append({'row_data': row, 'message': get_message('import_missing_name')})
                continue

            existing = store.companies.query(name=name)
            if existing:
                store.companies.update(existing[0]['id'], {'name': name})
                updated_count += 1
            else:
                store.companies.insert({'name': name})
                created_count += 1

    logger.info(f'Company import: {created_count} created, {updated_count} updated, {len(errors)} errors')
    return {
        'message': get_message('import_success', created=created_count,
                               updated=updated_count, errors=len(errors)),
        'created_count': created_count,
        'updated_count': updated_count,
        'errors': errors,
    }
