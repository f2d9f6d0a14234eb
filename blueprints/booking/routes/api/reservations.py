"""
Reservation API routes.
Listing, details, single and batch booking, updates, deletes and
availability checks.
"""

from flask import request
from flask_login import login_required

from database import get_store
from models.reservation import (
    check_equipment_availability_bulk, create_batch_reservations, create_reservation,
    delete_reservation, get_reservation_with_details, list_reservations, update_reservation,
)
from utils.api_response import (
    api_error, api_result, api_success, get_json_body, json_required_error,
)
from utils.datetime_helpers import parse_date
from utils.messages import get_message

BATCH_SHARED_FIELDS = ('company_id', 'technician_id', 'pickup_date', 'return_date', 'notes')


def register_routes(bp):
    """Register reservation routes on the blueprint."""

    @bp.route('/reservations')
    @login_required
    def reservations_list():
        """
        List reservations.

        Query params:
            from: Keep reservations ending on/after this date (optional)
            to: Keep reservations starting on/before this date (optional)
        """
        try:
            date_from = parse_date(request.args['from']) if request.args.get('from') else None
            date_to = parse_date(request.args['to']) if request.args.get('to') else None
        except ValueError:
            return api_error(get_message('invalid_date', field='Date'), 400, kind='validation')

        reservations = list_reservations(get_store(), date_from, date_to)
        return api_success(data=reservations, count=len(reservations))

    @bp.route('/reservations/<reservation_id>')
    @login_required
    def reservations_detail(reservation_id):
        """Reservation with equipment, technician and company."""
        reservation = get_reservation_with_details(get_store(), reservation_id)
        if reservation is None:
            return api_error(get_message('reservation_not_found'), 404, kind='not_found')
        return api_success(data=reservation)

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def reservations_create():
        """
        Book one piece of equipment.

        Request body:
            equipment_id, technician_id, company_id: IDs (required)
            pickup_date, return_date: YYYY-MM-DD (required, inclusive)
            notes: Free text (optional)

        Returns:
            201 with the reservation, 409 if the equipment is already booked
        """
        data = get_json_body()
        if not data:
            return json_required_error()
        return api_result(create_reservation(get_store(), data), status=201)

    @bp.route('/reservations/batch', methods=['POST'])
    @login_required
    def reservations_batch_create():
        """
        Book several pieces of equipment for the same window.

        Request body:
            equipment_ids: List of equipment IDs
            technician_id, company_id, pickup_date, return_date, notes

        Returns:
            201 with all reservations, or 409 naming every unavailable gage
            id (nothing is booked in that case)
        """
        data = get_json_body()
        if not data:
            return json_required_error()

        equipment_ids = data.get('equipment_ids')
        if equipment_ids is not None and not isinstance(equipment_ids, list):
            return api_error(get_message('batch_empty'), 400, kind='validation')

        shared = {k: data[k] for k in BATCH_SHARED_FIELDS if k in data}
        return api_result(create_batch_reservations(get_store(), equipment_ids, shared), status=201)

    @bp.route('/reservations/<reservation_id>', methods=['PUT'])
    @login_required
    def reservations_update(reservation_id):
        """Update a reservation; fields not sent keep their stored value."""
        data = get_json_body()
        return api_result(update_reservation(get_store(), {**data, 'id': reservation_id}))

    @bp.route('/reservations/<reservation_id>', methods=['DELETE'])
    @login_required
    def reservations_delete(reservation_id):
        """Delete a reservation."""
        return api_result(delete_reservation(get_store(), reservation_id))

    @bp.route('/reservations/check-availability', methods=['POST'])
    @login_required
    def reservations_check_availability():
        """
        Check whether equipment is free for a window.

        Request body:
            equipment_ids: List of equipment IDs
            pickup_date, return_date: YYYY-MM-DD
            exclude_reservation_id: Reservation being edited (optional)
        """
        data = get_json_body()
        equipment_ids = data.get('equipment_ids') or []
        if not isinstance(equipment_ids, list) or not all(isinstance(e, str) for e in equipment_ids):
            return api_error(get_message('invalid_id', field='Equipment'), 400, kind='validation')
        try:
            pickup = parse_date(data.get('pickup_date'))
            ret = parse_date(data.get('return_date'))
        except ValueError:
            return api_error(get_message('invalid_date', field='Date'), 400, kind='validation')
        if ret < pickup:
            return api_error(get_message('invalid_date_range'), 400, kind='validation')

        availability = check_equipment_availability_bulk(
            get_store(), equipment_ids, pickup, ret,
            exclude_reservation_id=data.get('exclude_reservation_id')
        )
        return api_success(**availability)
