"""
Admin routes for user, company and equipment management.
JSON endpoints restricted to the ADMIN role.
"""

from flask import Blueprint, current_app, request
from flask_login import login_required
from werkzeug.utils import secure_filename

from database import get_store
from models.company import create_company, delete_company, update_company
from models.equipment import create_equipment, delete_equipment, update_equipment
from models.user import create_user, delete_user, list_users, set_credential, update_user
from blueprints.admin.services import allowed_file, import_companies_file, import_equipment_file
from utils.api_response import api_error, api_result, api_success, get_json_body, json_required_error
from utils.decorators import role_required
from utils.messages import get_message

admin_bp = Blueprint('admin', __name__)


def _uploaded_file():
    """Return (file, filename) for the 'file' upload, or an error response."""
    file = request.files.get('file')
    if file is None or not file.filename:
        return None, api_error(get_message('file_required'), 400, kind='validation')

    filename = secure_filename(file.filename)
    allowed = current_app.config.get('ALLOWED_IMPORT_EXTENSIONS', {'csv', 'xlsx'})
    if not allowed_file(filename, allowed):
        return None, api_error(
            get_message('invalid_file_type', extensions=', '.join(sorted(allowed))),
            400, kind='validation'
        )
    return (file, filename), None


# =============================================================================
# USERS
# =============================================================================

@admin_bp.route('/users')
@login_required
@role_required('ADMIN')
def users():
    """List users (no credential material)."""
    role = request.args.get('role')
    return api_success(data=list_users(get_store(), role=role))


@admin_bp.route('/users', methods=['POST'])
@login_required
@role_required('ADMIN')
def users_create():
    """
    Create a user.

    Request body:
        name: Display name (required)
        email: Email (optional, unique)
        role: 'ADMIN' or 'TECHNICIAN' (default TECHNICIAN)
    """
    data = get_json_body()
    if not data:
        return json_required_error()
    return api_result(create_user(get_store(), data), status=201)


@admin_bp.route('/users/<user_id>', methods=['PUT'])
@login_required
@role_required('ADMIN')
def users_update(user_id):
    """Update a user; the stored credential is kept."""
    data = get_json_body()
    return api_result(update_user(get_store(), {**data, 'id': user_id}))


@admin_bp.route('/users/<user_id>', methods=['DELETE'])
@login_required
@role_required('ADMIN')
def users_delete(user_id):
    """Delete a user not referenced by any reservation."""
    return api_result(delete_user(get_store(), user_id))


@admin_bp.route('/users/<user_id>/password', methods=['POST'])
@login_required
@role_required('ADMIN')
def users_set_password(user_id):
    """
    Set a user's password.

    Request body:
        password: New password
    """
    data = get_json_body()
    return api_result(set_credential(get_store(), user_id, data.get('password')))


# =============================================================================
# COMPANIES
# =============================================================================

@admin_bp.route('/companies', methods=['POST'])
@login_required
@role_required('ADMIN')
def companies_create():
    """Create a company. Body: {'name'}"""
    data = get_json_body()
    if not data:
        return json_required_error()
    return api_result(create_company(get_store(), data), status=201)


@admin_bp.route('/companies/<company_id>', methods=['PUT'])
@login_required
@role_required('ADMIN')
def companies_update(company_id):
    """Rename a company."""
    data = get_json_body()
    return api_result(update_company(get_store(), {**data, 'id': company_id}))


@admin_bp.route('/companies/<company_id>', methods=['DELETE'])
@login_required
@role_required('ADMIN')
def companies_delete(company_id):
    """Delete a company not referenced by any reservation."""
    return api_result(delete_company(get_store(), company_id))


@admin_bp.route('/companies/import', methods=['POST'])
@login_required
@role_required('ADMIN')
def companies_import():
    """Import companies from an uploaded CSV/XLSX file with a 'name' column."""
    upload, error = _uploaded_file()
    if error:
        return error
    file, filename = upload
    try:
        result = import_companies_file(get_store(), file.stream, filename)
    except Exception as e:
        current_app.logger.error(f'Company import failed for {filename}: {e}', exc_info=True)
        return api_error(get_message('internal_error'), 500)
    return api_result(result)


# =============================================================================
# EQUIPMENT
# =============================================================================

@admin_bp.route('/equipment', methods=['POST'])
@login_required
@role_required('ADMIN')
def equipment_create():
    """
    Create equipment.

    Request body:
        gage_id, description (required); manufacturer, model, range, uom,
        image_url, calibration_due_date (optional)
    """
    data = get_json_body()
    if not data:
        return json_required_error()
    return api_result(create_equipment(get_store(), data), status=201)


@admin_bp.route('/equipment/<equipment_id>', methods=['PUT'])
@login_required
@role_required('ADMIN')
def equipment_update(equipment_id):
    """Update equipment fields."""
    data = get_json_body()
    return api_result(update_equipment(get_store(), {**data, 'id': equipment_id}))


@admin_bp.route('/equipment/<equipment_id>', methods=['DELETE'])
@login_required
@role_required('ADMIN')
def equipment_delete(equipment_id):
    """Delete equipment and its reservations."""
    return api_result(delete_equipment(get_store(), equipment_id))


@admin_bp.route('/equipment/import', methods=['POST'])
@login_required
@role_required('ADMIN')
def equipment_import():
    """
    Bulk create/update equipment from an uploaded file.

    Form data:
        file: CSV or XLSX with gageId, description, manufacturer, model,
              range, uom (and optional imageUrl) headers

    Returns:
        JSON with created_count, updated_count and per-row errors
    """
    upload, error = _uploaded_file()
    if error:
        return error
    file, filename = upload
    try:
        result = import_equipment_file(get_store(), file.stream, filename)
    except Exception as e:
        current_app.logger.error(f'Equipment import failed for {filename}: {e}', exc_info=True)
        return api_error(get_message('internal_error'), 500)
    return api_result(result)
