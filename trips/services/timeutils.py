import datetime

from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_time

MINUTES_PER_DAY = 24 * 60


def parse_clock_time(value):
    """
    Parse ``HH:MM`` or ``HH:MM:SS`` into a ``datetime.time``.

    Raises:
        ValidationError: for anything that is not a valid clock time.
    """
    if isinstance(value, datetime.time):
        return value
    try:
        parsed = parse_time(str(value).strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f'Invalid time "{value}". Use HH:MM or HH:MM:SS.')
    return parsed


def parse_iso_date(value, default=None):
    if value in (None, ''):
        return default
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f'Invalid date "{value}". Use YYYY-MM-DD.')
    return parsed


def minutes_between(start, end):
    """
    Whole minutes from ``start`` to ``end``.

    Clock times carry no date, so an end earlier than the start is taken to
    cross midnight (23:30 -> 00:15 is 45 minutes). Returns None when either
    side is missing.
    """
    if start is None or end is None:
        return None
    start_minutes = start.hour * 60 + start.minute
    end_minutes = end.hour * 60 + end.minute
    diff = end_minutes - start_minutes
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff


def current_clock_time():
    """Local wall-clock time truncated to the minute."""
    return timezone.localtime().time().replace(second=0, microsecond=0)
