"""
User model and data access functions.
Handles technician/admin records, credentials, display colours and
Flask-Login integration.
"""

import logging

from flask import current_app, has_app_context
from werkzeug.security import generate_password_hash

from models.errors import (
    NotFoundError, ReferenceGuardError, UniquenessError, ValidationError,
    returns_result,
)
from utils.messages import get_message
from utils.validators import optional_text, sanitize_input, validate_email, validate_password

logger = logging.getLogger(__name__)

ROLES = ('ADMIN', 'TECHNICIAN')

TECHNICIAN_COLORS = (
    '#3B82F6',  # blue
    '#22C55E',  # green
    '#6366F1',  # indigo
    '#A855F7',  # purple
    '#EC4899',  # pink
    '#CA8A04',  # yellow
    '#14B8A6',  # teal
    '#EF4444',  # red
)


class User:
    """
    User class for Flask-Login integration.
    Wraps a user record with required Flask-Login properties.
    """

    def __init__(self, user_dict):
        self.id = user_dict['id']
        self.name = user_dict['name']
        self.email = user_dict.get('email')
        self.role = user_dict['role']
        self.color = display_color(user_dict)

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    @property
    def is_admin(self):
        return self.role == 'ADMIN'

    def get_id(self):
        """Required by Flask-Login."""
        return str(self.id)


# =============================================================================
# DISPLAY COLOURS
# =============================================================================

def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def technician_color(user_id: str) -> str:
    """
    Deterministic palette colour for a user id.

    Uses the classic 32-bit string hash (hash * 31 + char), so the same id
    always maps to the same colour across processes and restarts.

    Args:
        user_id: User ID

    Returns:
        Hex colour from TECHNICIAN_COLORS
    """
    value = 0
    for char in str(user_id):
        value = ord(char) + (_to_int32(_to_int32(value) << 5) - value)
    return TECHNICIAN_COLORS[abs(value) % len(TECHNICIAN_COLORS)]


def display_color(user: dict) -> str:
    """Explicit display colour if set, otherwise the hashed palette colour."""
    return user.get('display_color') or technician_color(user['id'])


def public_user(user: dict) -> dict:
    """User record without credential material."""
    return {
        'id': user['id'],
        'name': user['name'],
        'email': user.get('email'),
        'role': user['role'],
        'display_color': user.get('display_color'),
        'color': display_color(user),
        'has_password': bool(user.get('password_hash')),
    }


# =============================================================================
# VALIDATION
# =============================================================================

def _normalize_email(store, email, exclude_id: str = None):
    email = optional_text(email)
    if email is None:
        return None
    email = email.lower()
    if not validate_email(email):
        raise ValidationError(get_message('invalid_email'), field='email')
    for other in store.users.query(email=email):
        if other['id'] != exclude_id:
            raise UniquenessError(get_message('email_exists', email=email), field='email')
    return email


def _normalize_role(role):
    role = sanitize_input(role).upper() or 'TECHNICIAN'
    if role not in ROLES:
        raise ValidationError(get_message('invalid_role', roles=', '.join(ROLES)), field='role')
    return role


def _require_user(store, user_id: str) -> dict:
    user = store.users.find(user_id) if user_id else None
    if user is None:
        raise NotFoundError(get_message('user_not_found'))
    return user


# =============================================================================
# QUERIES
# =============================================================================

def list_users(store, role: str = None) -> list:
    """
    List users ordered by name, without credentials.

    Args:
        store: Entity store
        role: Optional role filter ('ADMIN' or 'TECHNICIAN', any case)
    """
    match = {'role': role.strip().upper()} if role else {}
    return [public_user(u) for u in store.users.query(order_by=('name',), **match)]


def get_user(store, user_id: str):
    """Get user by ID (public form), or None."""
    user = store.users.find(user_id)
    return public_user(user) if user else None


# =============================================================================
# COMMANDS
# =============================================================================

@returns_result
def create_user(store, data: dict) -> dict:
    """
    Create a user without a credential.

    Args:
        store: Entity store
        data: {'name', 'email' (optional), 'role' (default TECHNICIAN),
               'display_color' (optional)}

    Returns:
        Result dict with 'user' (public form)
    """
    name = sanitize_input(data.get('name'), 100)
    if not name:
        raise ValidationError(get_message('field_required', field='Name'), field='name')

    with store.transaction():
        record = store.users.insert({
            'name': name,
            'email': _normalize_email(store, data.get('email')),
            'role': _normalize_role(data.get('role')),
            'password_hash': None,
            'display_color': optional_text(data.get('display_color'), 20),
        })

    logger.info(f"Created user {record['id']} ({record['role']})")
    return {'message': get_message('user_created'), 'user': public_user(record)}


@returns_result
def update_user(store, data: dict) -> dict:
    """
    Update name, email, role or display colour. The credential is preserved.

    Args:
        store: Entity store
        data: Must contain 'id'; other keys override stored values

    Returns:
        Result dict with 'user' (public form)
    """
    with store.transaction():
        user = _require_user(store, data.get('id'))
        changes = {}
        if 'name' in data:
            changes['name'] = sanitize_input(data['name'], 100)
            if not changes['name']:
                raise ValidationError(get_message('field_required', field='Name'), field='name')
        if 'email' in data:
            changes['email'] = _normalize_email(store, data['email'], exclude_id=user['id'])
        if 'role' in data:
            changes['role'] = _normalize_role(data['role'])
        if 'display_color' in data:
            changes['display_color'] = optional_text(data['display_color'], 20)
        record = store.users.update(user['id'], changes)

    return {'message': get_message('user_updated'), 'user': public_user(record)}


@returns_result
def delete_user(store, user_id: str) -> dict:
    """
    Delete a user unless reservations still reference them as technician.

    Returns:
        Result dict with 'id'
    """
    with store.transaction():
        user = _require_user(store, user_id)
        if store.reservations.exists(technician_id=user['id']):
            logger.info(f'Refused to delete user {user_id}: referenced by reservations')
            raise ReferenceGuardError(get_message('user_has_reservations'))
        store.users.delete(user['id'])

    logger.info(f'Deleted user {user_id}')
    return {'message': get_message('user_deleted'), 'id': user_id}


@returns_result
def set_credential(store, user_id: str, secret: str) -> dict:
    """
    Set or replace a user's password.

    The secret is stored as a werkzeug hash; it never appears in listings.

    Args:
        store: Entity store
        user_id: User ID
        secret: Plain-text password

    Returns:
        Result dict with 'user' (public form)
    """
    min_length = 6
    if has_app_context():
        min_length = current_app.config.get('MIN_PASSWORD_LENGTH', min_length)

    is_valid, error = validate_password(secret, min_length)
    if not is_valid:
        raise ValidationError(error, field='password')

    with store.transaction():
        user = _require_user(store, user_id)
        record = store.users.update(user['id'], {'password_hash': generate_password_hash(secret)})

    logger.info(f'Credential set for user {user_id}')
    return {'message': get_message('password_updated'), 'user': public_user(record)}
