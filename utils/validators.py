"""
Input validation helper functions.
Provides validation for common input types.
"""

import re


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_password(password: str, min_length: int = 6) -> tuple:
    """
    Validate password strength.

    Args:
        password: Password to validate
        min_length: Minimum password length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not password:
        return False, 'Password is required.'

    if len(password) < min_length:
        return False, f'Password must be at least {min_length} characters.'

    return True, ''


def sanitize_input(text, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize (non-strings are converted)
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if text is None:
        return ''

    # Strip whitespace
    sanitized = str(text).strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def optional_text(text, max_length: int = None):
    """Sanitize text, mapping blank input to None."""
    sanitized = sanitize_input(text, max_length)
    return sanitized or None
