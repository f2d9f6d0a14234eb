"""
Equipment availability checking.
Overlap predicate, conflict lookup and the per-day availability snapshot.

Dates are compared as ISO 'YYYY-MM-DD' strings, which order the same way
as the dates they represent.
"""

from utils.datetime_helpers import parse_date


def as_iso(value) -> str:
    """Normalize a date or date string to 'YYYY-MM-DD'."""
    return parse_date(value).isoformat()


# =============================================================================
# OVERLAP
# =============================================================================

def dates_overlap(a_start, a_end, b_start, b_end) -> bool:
    """
    Inclusive window overlap.

    Sharing a single day counts as overlap: a return on the 30th blocks a
    pickup on the 30th.
    """
    return as_iso(a_start) <= as_iso(b_end) and as_iso(a_end) >= as_iso(b_start)


def find_conflicts(
    store,
    equipment_id: str,
    pickup_date,
    return_date,
    exclude_reservation_id: str = None
) -> list:
    """
    Reservations of one piece of equipment overlapping a window.

    Args:
        store: Entity store
        equipment_id: Equipment ID
        pickup_date: Window start (inclusive)
        return_date: Window end (inclusive)
        exclude_reservation_id: Reservation ID to ignore (for updates)

    Returns:
        List of conflicting reservation dicts, by pickup date
    """
    pickup = as_iso(pickup_date)
    ret = as_iso(return_date)

    def overlaps(reservation):
        return (
            reservation['id'] != exclude_reservation_id
            and pickup <= reservation['return_date']
            and ret >= reservation['pickup_date']
        )

    return store.reservations.query(
        where=overlaps, order_by=('pickup_date',), equipment_id=equipment_id
    )


def has_conflict(
    store,
    equipment_id: str,
    pickup_date,
    return_date,
    exclude_reservation_id: str = None
) -> bool:
    """True if any other reservation of the equipment overlaps the window."""
    return bool(find_conflicts(store, equipment_id, pickup_date, return_date, exclude_reservation_id))


# =============================================================================
# BULK AVAILABILITY
# =============================================================================

def check_equipment_availability_bulk(
    store,
    equipment_ids: list,
    pickup_date,
    return_date,
    exclude_reservation_id: str = None
) -> dict:
    """
    Check a window for several pieces of equipment at once.

    Returns:
        dict: {
            'all_available': bool,
            'unavailable': [
                {'equipment_id', 'gage_id', 'reservation_id',
                 'pickup_date', 'return_date'}
            ]
        }
    """
    unavailable = []
    for equipment_id in equipment_ids:
        equipment = store.equipment.find(equipment_id)
        gage_id = equipment['gage_id'] if equipment else None
        for conflict in find_conflicts(store, equipment_id, pickup_date, return_date,
                                       exclude_reservation_id):
            unavailable.append({
                'equipment_id': equipment_id,
                'gage_id': gage_id,
                'reservation_id': conflict['id'],
                'pickup_date': conflict['pickup_date'],
                'return_date': conflict['return_date'],
            })

    return {
        'all_available': len(unavailable) == 0,
        'unavailable': unavailable,
    }


# =============================================================================
# DAILY SNAPSHOT
# =============================================================================

def get_booked_equipment_ids(store, on_date) -> set:
    """IDs of equipment with a reservation occupying the given day."""
    day = as_iso(on_date)
    booked = store.reservations.query(
        where=lambda r: r['pickup_date'] <= day <= r['return_date']
    )
    return {r['equipment_id'] for r in booked}


def get_available_equipment(store, on_date) -> list:
    """
    Equipment not booked on the given day, ordered by gage id.

    This is the inventory snapshot handed to the recommendation assistant.
    """
    booked = get_booked_equipment_ids(store, on_date)
    return store.equipment.query(
        where=lambda e: e['id'] not in booked, order_by=('gage_id',)
    )
