"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from flask import current_app, request
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect

from utils.api_response import api_error
from utils.messages import get_message

# Initialize Flask-Login
login_manager = LoginManager()

# Initialize CSRF Protection
csrf = CSRFProtect()


@login_manager.request_loader
def load_user_from_request(req):
    """
    Resolve the authenticated user handle sent by the external auth provider.

    Args:
        req: The incoming request

    Returns:
        User object or None (anonymous) if the handle is missing or unknown
    """
    from database import get_store
    from models.user import User

    user_id = req.headers.get(current_app.config['AUTH_USER_HEADER'], '').strip()
    if not user_id:
        return None

    user_dict = get_store().users.find(user_id)
    if user_dict:
        return User(user_dict)
    current_app.logger.info(f'Unknown user handle on {request.path}: {user_id}')
    return None


@login_manager.unauthorized_handler
def unauthorized():
    """JSON 401 for requests without a valid user handle."""
    return api_error(get_message('authentication_required'), status=401, kind='unauthorized')
