"""Timezone-aware date helpers for the reservation application."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from flask import current_app, request


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'America/Detroit')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def parse_date(value) -> date:
    """
    Parse a calendar date.

    Args:
        value: date, datetime, 'YYYY-MM-DD' string, or an ISO datetime
               string such as 'YYYY-MM-DDTHH:MM:SS'

    Returns:
        date (time of day dropped)

    Raises:
        ValueError: If the value is empty or not a valid date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValueError(f'Invalid date: {value!r}')
    text = value.strip()
    if len(text) > 10:
        return datetime.fromisoformat(text).date()
    return datetime.strptime(text, '%Y-%m-%d').date()


def get_request_date(arg_name: str = 'date') -> date:
    """
    Date from a query-string argument, defaulting to today.

    Raises:
        ValueError: If the argument is present but not a valid date
    """
    value = request.args.get(arg_name)
    if not value:
        return get_today()
    return parse_date(value)


def date_range(start: date, end: date) -> list:
    """Inclusive list of dates from start to end."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]
