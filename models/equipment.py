"""
Equipment (gage) data access functions.
Handles the gage catalogue: CRUD, search, cascade delete and bulk import.
"""

import logging

from models.errors import NotFoundError, UniquenessError, ValidationError, returns_result
from utils.datetime_helpers import parse_date
from utils.messages import get_message
from utils.validators import optional_text, sanitize_input

logger = logging.getLogger(__name__)

TEXT_FIELDS = ('description', 'manufacturer', 'model', 'range', 'uom')

# Imported header / payload key -> stored field name
FIELD_ALIASES = {
    'gageid': 'gage_id',
    'gage_id': 'gage_id',
    'gage id': 'gage_id',
    'description': 'description',
    'manufacturer': 'manufacturer',
    'model': 'model',
    'range': 'range',
    'uom': 'uom',
    'imageurl': 'image_url',
    'image_url': 'image_url',
    'image url': 'image_url',
    'calibrationduedate': 'calibration_due_date',
    'calibration_due_date': 'calibration_due_date',
    'duedate': 'calibration_due_date',
    'due_date': 'calibration_due_date',
}


def normalize_equipment_row(row: dict) -> dict:
    """Map aliased keys (gageId, imageUrl, dueDate...) onto stored field names."""
    normalized = {}
    for key, value in row.items():
        if key is None:
            continue
        field = FIELD_ALIASES.get(str(key).strip().lower())
        if field:
            normalized[field] = value
    return normalized


def _clean_due_date(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return parse_date(value).isoformat()
    except ValueError:
        raise ValidationError(
            get_message('invalid_date', field='Calibration due date'),
            field='calibration_due_date',
        )


def _clean_fields(data: dict) -> dict:
    """Sanitize the supplied writable fields (gage_id excluded)."""
    fields = {}
    for name in TEXT_FIELDS:
        if name in data:
            fields[name] = sanitize_input(data[name], 500)
    if 'image_url' in data:
        fields['image_url'] = optional_text(data['image_url'], 1000)
    if 'calibration_due_date' in data:
        fields['calibration_due_date'] = _clean_due_date(data['calibration_due_date'])
    return fields


def _ensure_unique_gage_id(store, gage_id: str, exclude_id: str = None):
    for other in store.equipment.query(gage_id=gage_id):
        if other['id'] != exclude_id:
            raise UniquenessError(get_message('gage_id_exists', gage_id=gage_id), field='gage_id')


# =============================================================================
# QUERIES
# =============================================================================

def list_equipment(store, search: str = None) -> list:
    """
    List equipment ordered by gage id, optionally filtered.

    Args:
        store: Entity store
        search: Case-insensitive term matched against description,
                gage id, model and manufacturer

    Returns:
        List of equipment dicts
    """
    term = sanitize_input(search).casefold()
    if not term:
        return store.equipment.query(order_by=('gage_id',))

    def matches(item):
        return any(
            term in (item.get(field) or '').casefold()
            for field in ('description', 'gage_id', 'model', 'manufacturer')
        )

    return store.equipment.query(where=matches, order_by=('gage_id',))


def get_equipment(store, equipment_id: str):
    """Get equipment by ID, or None."""
    return store.equipment.find(equipment_id)


def get_equipment_by_gage_id(store, gage_id: str):
    """Get equipment by case-insensitive gage id, or None."""
    if not gage_id:
        return None
    found = store.equipment.query(gage_id=str(gage_id).strip())
    return found[0] if found else None


# =============================================================================
# COMMANDS
# =============================================================================

@returns_result
def create_equipment(store, data: dict) -> dict:
    """
    Create a piece of equipment.

    Args:
        store: Entity store
        data: gage_id and description required; manufacturer, model, range,
              uom, image_url, calibration_due_date optional

    Returns:
        Result dict with 'equipment'
    """
    data = normalize_equipment_row(data)
    gage_id = sanitize_input(data.get('gage_id'), 100)
    if not gage_id:
        raise ValidationError(get_message('field_required', field='Gage ID'), field='gage_id')
    fields = _clean_fields(data)
    if not fields.get('description'):
        raise ValidationError(get_message('field_required', field='Description'), field='description')

    with store.transaction():
        _ensure_unique_gage_id(store, gage_id)
        record = store.equipment.insert({'gage_id': gage_id, **fields})

    return {'message': get_message('equipment_created'), 'equipment': record}


@returns_result
def update_equipment(store, data: dict) -> dict:
    """Update equipment fields; a changed gage id must stay unique."""
    equipment_id = data.get('id')
    data = normalize_equipment_row(data)
    fields = _clean_fields(data)
    if 'description' in fields and not fields['description']:
        raise ValidationError(get_message('field_required', field='Description'), field='description')

    with store.transaction():
        equipment = store.equipment.find(equipment_id) if equipment_id else None
        if equipment is None:
            raise NotFoundError(get_message('equipment_not_found'))
        if 'gage_id' in data:
            gage_id = sanitize_input(data['gage_id'], 100)
            if not gage_id:
                raise ValidationError(get_message('field_required', field='Gage ID'), field='gage_id')
            _ensure_unique_gage_id(store, gage_id, exclude_id=equipment_id)
            fields['gage_id'] = gage_id
        record = store.equipment.update(equipment_id, fields)

    return {'message': get_message('equipment_updated'), 'equipment': record}


@returns_result
def delete_equipment(store, equipment_id: str) -> dict:
    """
    Delete equipment together with all of its reservations.

    Returns:
        Result dict with 'id' and 'deleted_reservations'
    """
    with store.transaction():
        if not equipment_id or store.equipment.find(equipment_id) is None:
            raise NotFoundError(get_message('equipment_not_found'))
        removed = store.reservations.delete_where(equipment_id=equipment_id)
        store.equipment.delete(equipment_id)

    logger.info(f'Deleted equipment {equipment_id} and {removed} reservation(s)')
    return {
        'message': get_message('equipment_deleted', count=removed),
        'id': equipment_id,
        'deleted_reservations': removed,
    }


@returns_result
def bulk_upsert_equipment(store, rows: list) -> dict:
    """
    Create or update equipment from imported rows.

    Rows are matched on case-insensitive gage id. Unmatched rows are
    created; matched rows get every supplied field except the gage id
    overwritten. Rows without a gage id or description, or with a bad
    calibration date, are reported in 'errors' and skipped.

    Args:
        store: Entity store
        rows: List of dicts; keys may use import aliases (gageId, imageUrl...)

    Returns:
        Result dict with 'created_count', 'updated_count', 'errors'
        ([{'row_data', 'message'}])
    """
    created_count = 0
    updated_count = 0
    errors = []

    with store.transaction():
        for row in rows:
            data = normalize_equipment_row(row)
            gage_id = sanitize_input(data.get('gage_id'), 100)
            if not gage_id:
                errors.append({'row_data': row, 'message': get_message('import_missing_gage_id')})
                continue
            if not sanitize_input(data.get('description')):
                errors.append({'row_data': row, 'message': get_message('import_missing_description')})
                continue
            try:
                fields = _clean_fields(data)
            except ValidationError as e:
                errors.append({'row_data': row, 'message': e.message})
                continue

            existing = get_equipment_by_gage_id(store, gage_id)
            if existing:
                store.equipment.update(existing['id'], fields)
                updated_count += 1
            else:
                store.equipment.insert({'gage_id': gage_id, **fields})
                created_count += 1

    logger.info(f'Equipment import: {created_count} created, {updated_count} updated, {len(errors)} errors')
    return {
        'message': get_message('import_success', created=created_count,
                               updated=updated_count, errors=len(errors)),
        'created_count': created_count,
        'updated_count': updated_count,
        'errors': errors,
    }
