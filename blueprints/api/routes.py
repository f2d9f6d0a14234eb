"""
API routes for service-level JSON endpoints.
"""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import generate_csrf

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status and version
    """
    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'GageBook')
    })


@api_bp.route('/csrf-token')
def csrf_token():
    """CSRF token for clients that send state-changing requests."""
    return jsonify({'csrf_token': generate_csrf()})
