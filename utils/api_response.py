"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "message", "kind": "conflict"}

Usage:
    from utils.api_response import api_success, api_error, api_result

    return api_success(data={'id': 'eq-1'}, message='Created')
    return api_error('Data required', status=400)
    return api_result(create_reservation(store, data), status=201)
"""

from flask import jsonify, request
from typing import Any

from models.errors import STATUS_BY_KIND
from utils.messages import get_message


def api_success(
    data: Any = None,
    message: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields to include in the response.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., kind, unavailable).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    # Merge extra fields for additional error context
    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_result(result: dict, status: int = 200) -> tuple:
    """
    Translate a domain result dict into a JSON response.

    Failures get the HTTP status implied by their kind; the rest of the
    result is passed through at the top level.

    Args:
        result: Dict returned by a domain operation
        status: Status code to use on success

    Returns:
        Tuple of (Response, status_code)
    """
    fields = dict(result)
    if fields.pop('success'):
        message = fields.pop('message', None)
        return api_success(message=message, status=status, **fields)
    error = fields.pop('error')
    return api_error(error, status=STATUS_BY_KIND.get(fields.get('kind'), 400), **fields)


def get_json_body() -> dict:
    """Return the request JSON object, or an empty dict when absent/invalid."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def json_required_error() -> tuple:
    """Standard 400 for endpoints that need a JSON body."""
    return api_error(get_message('json_required'), status=400, kind='validation')
