"""
Domain error taxonomy and result helpers.

Domain functions raise DomainError subclasses internally. Public
operations are wrapped with @returns_result, which turns those errors
into failure dicts:

    Success:  {'success': True, 'message': '...', <payload>}
    Failure:  {'success': False, 'error': '...', 'kind': 'conflict'}
"""

import logging
from functools import wraps

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for rejections of a single operation."""

    kind = 'error'
    status = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DomainError):
    """Missing or malformed input."""

    kind = 'validation'
    status = 400


class NotFoundError(DomainError):
    """A referenced id does not exist."""

    kind = 'not_found'
    status = 404


class ConflictError(DomainError):
    """Scheduling overlap with an existing reservation."""

    kind = 'conflict'
    status = 409


class UniquenessError(DomainError):
    """Duplicate natural key (gage id, company name, email)."""

    kind = 'uniqueness'
    status = 409


class ReferenceGuardError(DomainError):
    """Delete refused because reservations still reference the record."""

    kind = 'in_use'
    status = 409


STATUS_BY_KIND = {cls.kind: cls.status for cls in (
    ValidationError, NotFoundError, ConflictError, UniquenessError, ReferenceGuardError
)}


def success(message: str = None, **payload) -> dict:
    """Build a success result."""
    result = {'success': True}
    if message:
        result['message'] = message
    result.update(payload)
    return result


def failure(error: DomainError) -> dict:
    """Build a failure result from a domain error."""
    result = {'success': False, 'error': error.message, 'kind': error.kind}
    result.update(error.details)
    return result


def returns_result(func):
    """
    Decorator: convert DomainError raised by func into a failure result.

    func returns a dict of payload fields (optionally including 'message');
    it is wrapped into a success result.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            payload = func(*args, **kwargs) or {}
        except DomainError as e:
            logger.info(f'{func.__name__} rejected ({e.kind}): {e.message}')
            return failure(e)
        return success(**payload)
    return wrapper
