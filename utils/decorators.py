"""
Route decorators for authentication and authorization.
Provides role-based access control for routes.
"""

from functools import wraps
from flask import current_app
from flask_login import login_required, current_user

from utils.api_response import api_error
from utils.messages import get_message


def role_required(*roles: str):
    """
    Decorator to require one of the given roles for a route.

    Usage:
        @admin_bp.route('/users')
        @login_required
        @role_required('ADMIN')
        def admin_users():
            ...

    Args:
        roles: Allowed role codes (e.g., 'ADMIN')

    Returns:
        Decorator function
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated or current_user.role not in roles:
                current_app.logger.info(
                    f'Denied {func.__name__} to {getattr(current_user, "id", "anonymous")}'
                )
                return api_error(get_message('permission_denied'), status=403, kind='forbidden')

            return func(*args, **kwargs)
        return wrapper
    return decorator


# Re-export login_required for convenience
__all__ = ['login_required', 'role_required']
