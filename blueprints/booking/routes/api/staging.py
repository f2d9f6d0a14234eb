"""
Staging API routes.
Daily pickup list with progress, and the staged toggle.
"""

from flask import request
from flask_login import login_required

from database import get_store
from models.staging import get_staging_summary, set_staged
from utils.api_response import api_error, api_result, api_success, get_json_body
from utils.datetime_helpers import get_request_date
from utils.messages import get_message


def register_routes(bp):
    """Register staging routes on the blueprint."""

    @bp.route('/staging')
    @login_required
    def staging_list():
        """
        Equipment to prepare for a pickup day.

        Query params:
            date: Pickup date YYYY-MM-DD (default: today)
            technician_id: Filter by technician (optional)

        Returns:
            JSON with items and progress (staged_count, total_count, percent)
        """
        try:
            day = get_request_date('date')
        except ValueError:
            return api_error(get_message('invalid_date', field='Date'), 400, kind='validation')

        summary = get_staging_summary(get_store(), day, request.args.get('technician_id') or None)
        return api_success(data=summary)

    @bp.route('/staging/<reservation_id>', methods=['POST'])
    @login_required
    def staging_toggle(reservation_id):
        """
        Mark a reservation staged or not.

        Request body:
            staged: true or false
        """
        data = get_json_body()
        return api_result(set_staged(get_store(), reservation_id, data.get('staged')))
