"""
Staging aggregator.
Pickup-day list of equipment to prepare, and the staged progress over it.
"""

import logging

from models.errors import NotFoundError, ValidationError, returns_result
from models.reservation_availability import as_iso
from models.user import public_user
from utils.messages import get_message

logger = logging.getLogger(__name__)


def get_staging_list(store, day, technician_id: str = None) -> list:
    """
    Reservations picked up exactly on `day`, joined for display.

    Items whose equipment, technician or company no longer exist are
    dropped. Sorted by technician name (case-insensitive); ties keep
    insertion order.

    Args:
        store: Entity store
        day: Pickup date
        technician_id: Optional technician filter

    Returns:
        List of {'reservation', 'equipment', 'technician', 'company'}
    """
    match = {'pickup_date': as_iso(day)}
    if technician_id:
        match['technician_id'] = technician_id

    items = []
    for reservation in store.reservations.query(**match):
        equipment = store.equipment.find(reservation['equipment_id'])
        technician = store.users.find(reservation['technician_id'])
        company = store.companies.find(reservation['company_id'])
        if not (equipment and technician and company):
            continue
        items.append({
            'reservation': reservation,
            'equipment': equipment,
            'technician': public_user(technician),
            'company': company,
        })

    items.sort(key=lambda item: item['technician']['name'].casefold())
    return items


def get_staging_progress(items: list) -> dict:
    """
    Staged count over total.

    Returns:
        dict: {'staged_count', 'total_count', 'percent'}; percent has two
        decimals and is 0 for an empty list
    """
    total_count = len(items)
    staged_count = sum(1 for item in items if item['reservation']['staged'])
    percent = round(staged_count / total_count * 100, 2) if total_count else 0
    return {'staged_count': staged_count, 'total_count': total_count, 'percent': percent}


def get_staging_summary(store, day, technician_id: str = None) -> dict:
    """Staging list plus progress for a day."""
    items = get_staging_list(store, day, technician_id)
    return {'date': as_iso(day), 'items': items, 'progress': get_staging_progress(items)}


@returns_result
def set_staged(store, reservation_id: str, staged) -> dict:
    """
    Mark a reservation staged or not. Touches no other field.

    Returns:
        Result dict with 'reservation'
    """
    if not isinstance(staged, bool):
        raise ValidationError(get_message('invalid_staged'), field='staged')

    with store.transaction():
        reservation = store.reservations.update(reservation_id, {'staged': staged}) if reservation_id else None
        if reservation is None:
            raise NotFoundError(get_message('reservation_not_found'))

    logger.debug(f'Reservation {reservation_id} staged={staged}')
    return {'message': get_message('staging_updated'), 'reservation': reservation}
