"""
Calendar API routes.
"""

from flask import request
from flask_login import login_required

from database import get_store
from models.calendar import build_calendar_view
from utils.api_response import api_result
from utils.datetime_helpers import get_today


def register_routes(bp):
    """Register calendar routes on the blueprint."""

    @bp.route('/calendar')
    @login_required
    def calendar_view():
        """
        Reservations projected onto a week or month grid.

        Query params:
            date: Anchor date YYYY-MM-DD (default: today)
            mode: 'week' or 'month' (default: month)
            technician_id: Filter by technician (optional)
        """
        anchor = request.args.get('date') or get_today()
        mode = request.args.get('mode', 'month')
        result = build_calendar_view(
            get_store(), anchor, mode, technician_id=request.args.get('technician_id') or None
        )
        return api_result(result)
