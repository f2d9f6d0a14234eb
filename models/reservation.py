"""
Reservation data access functions.
Booking, availability and querying of equipment reservations.

This module re-exports the functions of the split modules:
- reservation_availability.py: Overlap predicate, conflicts, daily snapshot
- reservation_crud.py: Create (single and batch), update, delete
- reservation_queries.py: Lists, upcoming/past split, details, history
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# Availability
from .reservation_availability import (
    dates_overlap,
    find_conflicts,
    has_conflict,
    check_equipment_availability_bulk,
    get_booked_equipment_ids,
    get_available_equipment,
)

# CRUD operations
from .reservation_crud import (
    create_reservation,
    create_batch_reservations,
    update_reservation,
    delete_reservation,
)

# Query operations
from .reservation_queries import (
    list_reservations,
    list_reservations_for_technician,
    list_reservations_for_equipment,
    list_reservations_on_day,
    classify_reservation,
    split_upcoming_past,
    get_reservation_with_details,
    get_company_equipment_history,
)

# =============================================================================
# PUBLIC API
# =============================================================================

__all__ = [
    # Availability
    'dates_overlap',
    'find_conflicts',
    'has_conflict',
    'check_equipment_availability_bulk',
    'get_booked_equipment_ids',
    'get_available_equipment',

    # CRUD
    'create_reservation',
    'create_batch_reservations',
    'update_reservation',
    'delete_reservation',

    # Queries
    'list_reservations',
    'list_reservations_for_technician',
    'list_reservations_for_equipment',
    'list_reservations_on_day',
    'classify_reservation',
    'split_upcoming_past',
    'get_reservation_with_details',
    'get_company_equipment_history',
]
