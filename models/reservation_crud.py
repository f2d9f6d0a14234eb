"""
Reservation CRUD operations.
Handles create (single and batch), update and delete for reservations.

Every check-then-write runs inside store.transaction(), so the
availability check and the insert it guards cannot interleave with
another writer.
"""

import logging

from models.errors import ConflictError, NotFoundError, ValidationError, returns_result
from models.reservation_availability import check_equipment_availability_bulk, find_conflicts
from utils.datetime_helpers import parse_date
from utils.messages import get_message
from utils.validators import sanitize_input

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ('company_id', 'Company'),
    ('pickup_date', 'Pickup date'),
    ('return_date', 'Return date'),
    ('equipment_id', 'Equipment'),
    ('technician_id', 'Technician'),
)

ID_FIELDS = (
    ('equipment_id', 'Equipment'),
    ('technician_id', 'Technician'),
    ('company_id', 'Company'),
)

WRITABLE_FIELDS = (
    'equipment_id', 'technician_id', 'company_id',
    'pickup_date', 'return_date', 'notes', 'staged',
)


# =============================================================================
# VALIDATION
# =============================================================================

def _parse_window(data: dict) -> tuple:
    """Parse pickup/return dates to ISO strings and check their order."""
    window = []
    for field, label in (('pickup_date', 'Pickup date'), ('return_date', 'Return date')):
        try:
            window.append(parse_date(data[field]).isoformat())
        except (ValueError, TypeError):
            raise ValidationError(get_message('invalid_date', field=label), field=field)
    pickup, ret = window
    if ret < pickup:
        raise ValidationError(get_message('invalid_date_range'), field='return_date')
    return pickup, ret


def _validate_record(data: dict, fields=REQUIRED_FIELDS) -> dict:
    """
    Check required fields and dates; return a normalized record.

    Args:
        data: Candidate reservation fields
        fields: (key, label) pairs that must be present

    Raises:
        ValidationError: Missing field, non-string id, bad date, or return
            before pickup
    """
    for field, label in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(get_message('field_required', field=label), field=field)
    for field, label in ID_FIELDS:
        if field in data and not isinstance(data[field], str):
            raise ValidationError(get_message('invalid_id', field=label), field=field)

    pickup, ret = _parse_window(data)
    record = {
        'pickup_date': pickup,
        'return_date': ret,
        'notes': sanitize_input(data.get('notes'), 2000),
    }
    for field in ('equipment_id', 'technician_id', 'company_id'):
        if field in data:
            record[field] = data[field]
    return record


def _require_references(store, record: dict) -> dict:
    """Ensure equipment, technician and company exist; return the equipment."""
    equipment = store.equipment.find(record['equipment_id'])
    if equipment is None:
        raise NotFoundError(get_message('equipment_not_found'), field='equipment_id')
    if store.users.find(record['technician_id']) is None:
        raise NotFoundError(get_message('technician_not_found'), field='technician_id')
    if store.companies.find(record['company_id']) is None:
        raise NotFoundError(get_message('company_not_found'), field='company_id')
    return equipment


def _conflict_error(equipment: dict, conflicts: list) -> ConflictError:
    first = conflicts[0]
    return ConflictError(
        get_message('equipment_booked', gage_id=equipment['gage_id'],
                    pickup=first['pickup_date'], ret=first['return_date']),
        gage_ids=[equipment['gage_id']],
        conflicts=[c['id'] for c in conflicts],
    )


# =============================================================================
# CREATE
# =============================================================================

@returns_result
def create_reservation(store, data: dict) -> dict:
    """
    Book one piece of equipment for a date window.

    Args:
        store: Entity store
        data: company_id, pickup_date, return_date, equipment_id,
              technician_id required; notes optional

    Returns:
        Result dict with 'reservation'
    """
    record = _validate_record(data)

    with store.transaction():
        equipment = _require_references(store, record)
        conflicts = find_conflicts(store, record['equipment_id'],
                                   record['pickup_date'], record['return_date'])
        if conflicts:
            logger.info(
                f"Booking rejected: {equipment['gage_id']} already booked "
                f"{conflicts[0]['pickup_date']}..{conflicts[0]['return_date']}"
            )
            raise _conflict_error(equipment, conflicts)
        reservation = store.reservations.insert({**record, 'staged': False})

    logger.info(f"Created reservation {reservation['id']} for {equipment['gage_id']}")
    return {'message': get_message('reservation_created'), 'reservation': reservation}


@returns_result
def create_batch_reservations(store, equipment_ids: list, shared_fields: dict) -> dict:
    """
    Book several pieces of equipment with the same dates, company and technician.

    All-or-nothing: if any item conflicts or references missing equipment,
    nothing is stored and the failure names every offending gage id.

    Args:
        store: Entity store
        equipment_ids: Equipment IDs (duplicates are ignored)
        shared_fields: company_id, technician_id, pickup_date, return_date,
                       notes

    Returns:
        Result dict with 'reservations' and 'count'
    """
    equipment_ids = equipment_ids or []
    if not isinstance(equipment_ids, list) or not all(isinstance(eid, str) for eid in equipment_ids):
        raise ValidationError(get_message('invalid_id', field='Equipment'), field='equipment_ids')
    unique_ids = list(dict.fromkeys(eid for eid in equipment_ids if eid))
    if not unique_ids:
        raise ValidationError(get_message('batch_empty'), field='equipment_ids')

    shared = {k: v for k, v in shared_fields.items() if k != 'equipment_id'}
    record = _validate_record(shared, [f for f in REQUIRED_FIELDS if f[0] != 'equipment_id'])

    with store.transaction():
        if store.users.find(record['technician_id']) is None:
            raise NotFoundError(get_message('technician_not_found'), field='technician_id')
        if store.companies.find(record['company_id']) is None:
            raise NotFoundError(get_message('company_not_found'), field='company_id')

        missing = [eid for eid in unique_ids if store.equipment.find(eid) is None]
        if missing:
            raise NotFoundError(get_message('equipment_not_found'), field='equipment_ids',
                                missing=missing)

        availability = check_equipment_availability_bulk(
            store, unique_ids, record['pickup_date'], record['return_date']
        )
        if not availability['all_available']:
            gage_ids = list(dict.fromkeys(u['gage_id'] for u in availability['unavailable']))
            logger.info(f"Batch booking rejected: {', '.join(gage_ids)} unavailable")
            raise ConflictError(
                get_message('batch_conflict', gage_ids=', '.join(gage_ids)),
                gage_ids=gage_ids,
                unavailable=availability['unavailable'],
            )

        reservations = [
            store.reservations.insert({**record, 'equipment_id': eid, 'staged': False})
            for eid in unique_ids
        ]

    logger.info(f'Created {len(reservations)} reservations in batch')
    return {
        'message': get_message('reservations_created', count=len(reservations)),
        'reservations': reservations,
        'count': len(reservations),
    }


# =============================================================================
# UPDATE
# =============================================================================

@returns_result
def update_reservation(store, data: dict) -> dict:
    """
    Update a reservation in place.

    Provided fields override stored ones; the merged record is re-validated
    and re-checked for conflicts, ignoring the reservation itself.

    Args:
        store: Entity store
        data: Must contain 'id'

    Returns:
        Result dict with 'reservation'
    """
    reservation_id = data.get('id')
    if not reservation_id:
        raise ValidationError(get_message('field_required', field='Reservation'), field='id')

    with store.transaction():
        existing = store.reservations.find(reservation_id)
        if existing is None:
            raise NotFoundError(get_message('reservation_not_found'))

        merged = {**existing, **{k: v for k, v in data.items() if k in WRITABLE_FIELDS}}
        if not isinstance(merged['staged'], bool):
            raise ValidationError(get_message('invalid_staged'), field='staged')
        record = _validate_record(merged)
        record['staged'] = merged['staged']

        equipment = _require_references(store, record)
        conflicts = find_conflicts(store, record['equipment_id'], record['pickup_date'],
                                   record['return_date'], exclude_reservation_id=reservation_id)
        if conflicts:
            logger.info(f"Update of {reservation_id} rejected: {equipment['gage_id']} unavailable")
            raise _conflict_error(equipment, conflicts)

        reservation = store.reservations.update(reservation_id, record)

    return {'message': get_message('reservation_updated'), 'reservation': reservation}


# =============================================================================
# DELETE
# =============================================================================

@returns_result
def delete_reservation(store, reservation_id: str) -> dict:
    """Delete a reservation; unknown ids are reported as not found."""
    with store.transaction():
        if not reservation_id or not store.reservations.delete(reservation_id):
            raise NotFoundError(get_message('reservation_not_found'))

    logger.info(f'Deleted reservation {reservation_id}')
    return {'message': get_message('reservation_deleted'), 'id': reservation_id}
