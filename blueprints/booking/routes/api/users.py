"""
User API routes.
Technician list and per-technician upcoming/past reservations.
"""

from flask import request
from flask_login import current_user, login_required

from database import get_store
from models.reservation import (
    list_reservations_for_technician, list_reservations_on_day, split_upcoming_past,
)
from models.user import get_user, list_users
from utils.api_response import api_error, api_success
from utils.datetime_helpers import get_today, parse_date
from utils.messages import get_message


def register_routes(bp):
    """Register user routes on the blueprint."""

    @bp.route('/users')
    @login_required
    def users_list():
        """Users with their display colour (no credential material)."""
        return api_success(data=list_users(get_store()))

    @bp.route('/me')
    @login_required
    def users_me():
        """The authenticated user."""
        return api_success(data=get_user(get_store(), current_user.id))

    @bp.route('/technicians/<technician_id>/reservations')
    @login_required
    def technician_reservations(technician_id):
        """
        A technician's reservations split into upcoming and past.

        Query params:
            date: Only reservations occupying this day (optional)
        """
        store = get_store()
        if get_user(store, technician_id) is None:
            return api_error(get_message('technician_not_found'), 404, kind='not_found')

        day = request.args.get('date')
        if day:
            try:
                reservations = list_reservations_on_day(store, parse_date(day), technician_id)
            except ValueError:
                return api_error(get_message('invalid_date', field='Date'), 400, kind='validation')
        else:
            reservations = list_reservations_for_technician(store, technician_id)

        return api_success(data=split_upcoming_past(reservations, get_today()))
