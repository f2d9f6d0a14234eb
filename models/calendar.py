"""
Calendar projector.
Maps reservations onto week and month grids. Read-only; weeks start on
Sunday.
"""

import calendar as _calendar
from datetime import date, timedelta

from models.errors import ValidationError, returns_result
from models.reservation_availability import as_iso
from models.reservation_queries import list_reservations
from models.user import public_user
from utils.datetime_helpers import date_range, parse_date
from utils.messages import get_message

VIEW_MODES = ('week', 'month')


def _week_start(day: date) -> date:
    """The Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def get_days_in_view(anchor, mode: str) -> list:
    """
    Dates shown for a view.

    week:  7 days starting on the Sunday on or before the anchor.
    month: the anchor's month padded back to a Sunday and forward to a
           Saturday, so the length is always a multiple of 7.

    Raises:
        ValidationError: Unknown mode
    """
    anchor = parse_date(anchor)
    if mode == 'week':
        start = _week_start(anchor)
        return date_range(start, start + timedelta(days=6))
    if mode == 'month':
        first = anchor.replace(day=1)
        last = anchor.replace(day=_calendar.monthrange(anchor.year, anchor.month)[1])
        end = last + timedelta(days=(5 - last.weekday()) % 7)
        return date_range(_week_start(first), end)
    raise ValidationError(get_message('invalid_view_mode'), field='mode')


def occupies(reservation: dict, day) -> bool:
    """True if the reservation holds its equipment on `day` (inclusive)."""
    target = as_iso(day)
    return reservation['pickup_date'] <= target <= reservation['return_date']


def _group_by_technician(reservations: list) -> list:
    groups = {}
    for reservation in reservations:
        groups.setdefault(reservation['technician_id'], []).append(reservation)
    return [{'technician_id': tid, 'reservations': items} for tid, items in groups.items()]


def project_reservations(days: list, reservations: list) -> list:
    """
    Per-day projection (month grid).

    Returns:
        list: [{'date', 'groups': [{'technician_id', 'reservations'}]}];
        technicians appear in order of first appearance that day
    """
    return [
        {
            'date': as_iso(day),
            'groups': _group_by_technician([r for r in reservations if occupies(r, day)]),
        }
        for day in days
    ]


def project_week_spans(days: list, reservations: list) -> list:
    """
    Horizontal spans for the week strip.

    One span per reservation overlapping the window, clipped to it:
    start_index is the first visible column and day_count the number of
    visible days.

    Returns:
        list: [{'technician_id', 'spans': [{'reservation', 'start_index',
        'day_count'}]}]
    """
    if not days:
        return []
    first = parse_date(days[0])
    last_index = len(days) - 1
    window_start = as_iso(days[0])
    window_end = as_iso(days[-1])

    groups = {}
    for reservation in reservations:
        if reservation['pickup_date'] > window_end or reservation['return_date'] < window_start:
            continue
        start_offset = (parse_date(reservation['pickup_date']) - first).days
        end_offset = (parse_date(reservation['return_date']) - first).days
        start_index = max(0, start_offset)
        end_index = min(last_index, end_offset)
        groups.setdefault(reservation['technician_id'], []).append({
            'reservation': reservation,
            'start_index': start_index,
            'day_count': max(1, end_index - start_index + 1),
        })
    return [{'technician_id': tid, 'spans': spans} for tid, spans in groups.items()]


@returns_result
def build_calendar_view(store, anchor, mode: str = 'month', technician_id: str = None) -> dict:
    """
    Complete calendar payload for a view.

    Args:
        store: Entity store
        anchor: Any date inside the wanted week or month
        mode: 'week' or 'month'
        technician_id: Optional technician filter

    Returns:
        Result dict with 'mode', 'anchor', 'days', 'projection' (per-day
        groups for month, spans for week) and 'technicians' (with colours)
    """
    try:
        anchor = parse_date(anchor)
    except ValueError:
        raise ValidationError(get_message('invalid_date', field='Date'), field='date')
    days = get_days_in_view(anchor, mode)

    reservations = list_reservations(store, days[0], days[-1])
    if technician_id:
        reservations = [r for r in reservations if r['technician_id'] == technician_id]

    technicians = {}
    for reservation in reservations:
        tid = reservation['technician_id']
        if tid not in technicians:
            technicians[tid] = store.users.find(tid)
    reservations = [r for r in reservations if technicians.get(r['technician_id'])]

    if mode == 'week':
        projection = project_week_spans(days, reservations)
    else:
        projection = project_reservations(days, reservations)

    return {
        'mode': mode,
        'anchor': anchor.isoformat(),
        'days': [d.isoformat() for d in days],
        'in_month': [d.month == anchor.month for d in days],
        'projection': projection,
        'technicians': sorted(
            (public_user(u) for u in technicians.values() if u),
            key=lambda u: u['name'].casefold(),
        ),
    }
