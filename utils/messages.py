"""
Centralized UI messages.
All user-facing text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'reservation_created': 'Reservation created successfully!',
    'reservations_created': '{count} reservations created successfully!',
    'reservation_updated': 'Reservation updated successfully!',
    'reservation_deleted': 'Reservation deleted.',
    'staging_updated': 'Staging status updated.',
    'user_created': 'User added. Please set a password for them.',
    'user_updated': 'User updated successfully.',
    'user_deleted': 'User deleted.',
    'password_updated': 'Password updated successfully.',
    'company_created': 'Company added successfully.',
    'company_updated': 'Company updated successfully.',
    'company_deleted': 'Company deleted.',
    'equipment_created': 'Equipment added successfully.',
    'equipment_updated': 'Equipment updated successfully.',
    'equipment_deleted': 'Equipment deleted along with {count} reservation(s).',
    'import_success': 'Import complete: {created} created, {updated} updated, {errors} error(s).',

    # Error messages
    'field_required': '{field} is required.',
    'invalid_date': '{field} must be a valid date (YYYY-MM-DD).',
    'invalid_date_range': 'Return date cannot be before pickup date.',
    'equipment_booked': 'This equipment ({gage_id}) is already booked between {pickup} and {ret}.',
    'batch_conflict': 'Some equipment is already booked for the selected dates: {gage_ids}. No reservations were created.',
    'batch_empty': 'Select at least one piece of equipment.',
    'invalid_id': '{field} must be an ID string.',
    'reservation_not_found': 'Could not find reservation.',
    'equipment_not_found': 'Could not find equipment.',
    'technician_not_found': 'Could not find technician.',
    'company_not_found': 'Could not find company.',
    'user_not_found': 'User not found.',
    'invalid_role': 'Role must be one of: {roles}.',
    'invalid_email': 'Invalid email format.',
    'email_exists': 'User with email "{email}" already exists.',
    'gage_id_exists': 'Gage ID "{gage_id}" already exists.',
    'company_exists': 'Company "{name}" already exists.',
    'user_has_reservations': 'Cannot delete user with reservations. Please reassign their reservations first.',
    'company_has_reservations': 'Cannot delete company with reservations.',
    'invalid_staged': 'Staged must be true or false.',
    'invalid_view_mode': 'View mode must be "week" or "month".',
    'import_missing_gage_id': 'Gage ID is required.',
    'import_missing_description': 'Description is required.',
    'import_missing_name': 'Company name is required.',
    'import_missing_headers': 'File is missing required headers: {headers}',
    'import_no_rows': 'No data rows found in the file.',
    'invalid_file_type': 'File type not allowed. Use: {extensions}',
    'file_required': 'A file is required.',
    'unreadable_file': 'Could not read the file. Check its format.',
    'permission_denied': 'You do not have permission for this action.',
    'authentication_required': 'Authentication required.',
    'not_found': 'Resource not found.',
    'method_not_allowed': 'Method not allowed.',
    'internal_error': 'Internal server error.',
    'json_required': 'A JSON body is required.',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
