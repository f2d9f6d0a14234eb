"""
Company API routes.
"""

from flask_login import login_required

from database import get_store
from models.company import get_company, list_companies
from models.reservation import get_company_equipment_history
from utils.api_response import api_error, api_success
from utils.messages import get_message


def register_routes(bp):
    """Register company routes on the blueprint."""

    @bp.route('/companies')
    @login_required
    def companies_list():
        """List companies by name."""
        return api_success(data=list_companies(get_store()))

    @bp.route('/companies/<company_id>/history')
    @login_required
    def companies_history(company_id):
        """Equipment a company has booked, each with its reservations (newest first)."""
        store = get_store()
        company = get_company(store, company_id)
        if company is None:
            return api_error(get_message('company_not_found'), 404, kind='not_found')
        return api_success(data=get_company_equipment_history(store, company_id), company=company)
