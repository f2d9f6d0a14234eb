"""
Equipment API routes.
Catalogue search, daily availability snapshot and per-equipment bookings.
"""

from flask import request
from flask_login import login_required

from database import get_store
from models.equipment import get_equipment, list_equipment
from models.reservation import get_available_equipment, list_reservations_for_equipment
from utils.api_response import api_error, api_success
from utils.datetime_helpers import get_request_date, get_today
from utils.messages import get_message


def register_routes(bp):
    """Register equipment routes on the blueprint."""

    @bp.route('/equipment')
    @login_required
    def equipment_list():
        """
        List equipment.

        Query params:
            q: Search term over description, gage id, model, manufacturer
        """
        equipment = list_equipment(get_store(), request.args.get('q'))
        return api_success(data=equipment, count=len(equipment))

    @bp.route('/equipment/available')
    @login_required
    def equipment_available():
        """
        Equipment not booked on a day.

        Query params:
            date: YYYY-MM-DD (default: today)
        """
        try:
            day = get_request_date('date')
        except ValueError:
            return api_error(get_message('invalid_date', field='Date'), 400, kind='validation')

        equipment = get_available_equipment(get_store(), day)
        return api_success(data=equipment, count=len(equipment), date=day.isoformat())

    @bp.route('/equipment/<equipment_id>')
    @login_required
    def equipment_detail(equipment_id):
        """Single equipment record."""
        equipment = get_equipment(get_store(), equipment_id)
        if equipment is None:
            return api_error(get_message('equipment_not_found'), 404, kind='not_found')
        return api_success(data=equipment)

    @bp.route('/equipment/<equipment_id>/reservations')
    @login_required
    def equipment_reservations(equipment_id):
        """
        Bookings of one piece of equipment.

        Query params:
            all: 'true' to include reservations already returned
        """
        store = get_store()
        if get_equipment(store, equipment_id) is None:
            return api_error(get_message('equipment_not_found'), 404, kind='not_found')

        include_all = request.args.get('all', 'false').lower() == 'true'
        reservations = list_reservations_for_equipment(
            store, equipment_id, only_future_or_active=not include_all, today=get_today()
        )
        return api_success(data=reservations, count=len(reservations))
