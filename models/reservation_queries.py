"""
Reservation query operations.
Listing, per-technician and per-equipment views, joined details and
company history.
"""

from datetime import date

from flask import has_app_context

from models.reservation_availability import as_iso
from models.user import public_user
from utils.datetime_helpers import get_today


# =============================================================================
# LISTS
# =============================================================================

def list_reservations(store, date_from=None, date_to=None) -> list:
    """
    List reservations ordered by pickup date.

    Args:
        store: Entity store
        date_from: Optional start; keeps reservations ending on/after it
        date_to: Optional end; keeps reservations starting on/before it

    Returns:
        List of reservation dicts
    """
    start = as_iso(date_from) if date_from else None
    end = as_iso(date_to) if date_to else None

    def in_window(reservation):
        if start and reservation['return_date'] < start:
            return False
        if end and reservation['pickup_date'] > end:
            return False
        return True

    return store.reservations.query(where=in_window, order_by=('pickup_date',))


def list_reservations_for_technician(store, technician_id: str) -> list:
    """Reservations of one technician, by pickup date ascending."""
    return store.reservations.query(order_by=('pickup_date',), technician_id=technician_id)


def list_reservations_for_equipment(
    store,
    equipment_id: str,
    only_future_or_active: bool = True,
    today=None
) -> list:
    """
    Reservations of one piece of equipment, by pickup date.

    Args:
        store: Entity store
        equipment_id: Equipment ID
        only_future_or_active: Keep only reservations returning today or later
        today: Reference date (default: today in the configured timezone,
               or the local date outside an app context)
    """
    if only_future_or_active:
        if today is None:
            today = get_today() if has_app_context() else date.today()
        cutoff = as_iso(today)
        return store.reservations.query(
            where=lambda r: r['return_date'] >= cutoff,
            order_by=('pickup_date',),
            equipment_id=equipment_id,
        )
    return store.reservations.query(order_by=('pickup_date',), equipment_id=equipment_id)


def list_reservations_on_day(store, day, technician_id: str = None) -> list:
    """Reservations occupying a day (pickup <= day <= return)."""
    target = as_iso(day)
    match = {'technician_id': technician_id} if technician_id else {}
    return store.reservations.query(
        where=lambda r: r['pickup_date'] <= target <= r['return_date'],
        order_by=('pickup_date',),
        **match,
    )


# =============================================================================
# UPCOMING / PAST
# =============================================================================

def classify_reservation(reservation: dict, today) -> str:
    """'upcoming' while the return date is today or later, else 'past'."""
    return 'upcoming' if reservation['return_date'] >= as_iso(today) else 'past'


def split_upcoming_past(reservations: list, today) -> dict:
    """
    Partition reservations around a reference date.

    Upcoming keeps pickup order (soonest first); past is most recent first.

    Returns:
        dict: {'upcoming': [...], 'past': [...]}
    """
    upcoming = []
    past = []
    for reservation in reservations:
        if classify_reservation(reservation, today) == 'upcoming':
            upcoming.append(reservation)
        else:
            past.append(reservation)
    upcoming.sort(key=lambda r: r['pickup_date'])
    past.sort(key=lambda r: r['pickup_date'], reverse=True)
    return {'upcoming': upcoming, 'past': past}


# =============================================================================
# DETAILS
# =============================================================================

def get_reservation_with_details(store, reservation_id: str):
    """
    Reservation joined with its equipment, technician and company.

    Returns:
        dict with 'equipment', 'technician' (public form), 'company' keys
        added, or None if the reservation does not exist
    """
    reservation = store.reservations.find(reservation_id)
    if reservation is None:
        return None
    technician = store.users.find(reservation['technician_id'])
    return {
        **reservation,
        'equipment': store.equipment.find(reservation['equipment_id']),
        'technician': public_user(technician) if technician else None,
        'company': store.companies.find(reservation['company_id']),
    }


def get_company_equipment_history(store, company_id: str) -> list:
    """
    A company's reservations grouped per piece of equipment.

    Groups are ordered by their most recent pickup; reservations inside a
    group are newest first.

    Returns:
        list: [{'equipment': dict, 'reservations': [...]}]
    """
    reservations = store.reservations.query(company_id=company_id)
    reservations.sort(key=lambda r: r['pickup_date'], reverse=True)

    groups = {}
    for reservation in reservations:
        equipment_id = reservation['equipment_id']
        if equipment_id not in groups:
            groups[equipment_id] = {
                'equipment': store.equipment.find(equipment_id),
                'reservations': [],
            }
        groups[equipment_id]['reservations'].append(reservation)

    return [g for g in groups.values() if g['equipment'] is not None]
