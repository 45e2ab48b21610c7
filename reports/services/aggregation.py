"""
Aggregations over delivery and transportation records.

Cancelled records stand in for deleted ones and are left out of every count.
"""
import calendar
import datetime
import logging
from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.utils import timezone

from trips.models import CANCELLED, COMPLETED, IN_PROGRESS, PENDING, RECORD_MODELS, TransportationRecord
from trips.services.timeutils import parse_iso_date

logger = logging.getLogger(__name__)

DEFAULT_RECORD_TYPE = TransportationRecord.RECORD_TYPE

CURRENT_MONTH = 'current_month'
LAST_MONTH = 'last_month'
CUSTOM = 'custom'
PERIODS = (CURRENT_MONTH, LAST_MONTH, CUSTOM)

DIMENSIONS = ('driver', 'vehicle', 'route', 'month')


def completion_rate(completed, total) -> int:
    """Percentage of completed records, rounded half up; 0 when there are none."""
    if not total:
        return 0
    rate = Decimal(completed) * 100 / Decimal(total)
    return int(rate.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def record_model_for(record_type):
    model = RECORD_MODELS.get(record_type or DEFAULT_RECORD_TYPE)
    if model is None:
        raise ValidationError(f'Unknown record type "{record_type}". Use one of: {", ".join(RECORD_MODELS)}.')
    return model


def month_bounds(day):
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def resolve_period(period=None, start=None, end=None, today=None):
    """
    Return ``(start_date, end_date)`` for a named period or a custom range.

    Raises:
        ValidationError: on an unknown period or an unusable custom range.
    """
    today = today or timezone.localdate()
    period = period or CURRENT_MONTH
    if period == CURRENT_MONTH:
        return month_bounds(today)
    if period == LAST_MONTH:
        return month_bounds(today.replace(day=1) - datetime.timedelta(days=1))
    if period == CUSTOM:
        start_date = parse_iso_date(start)
        end_date = parse_iso_date(end)
        if start_date is None or end_date is None:
            raise ValidationError('A custom period needs both start and end dates.')
        if end_date < start_date:
            raise ValidationError('End date must not be before start date.')
        return start_date, end_date
    raise ValidationError(f'Unknown period "{period}". Use one of: {", ".join(PERIODS)}.')


def records_between(model, start_date, end_date, queryset=None):
    queryset = queryset if queryset is not None else model.objects.all()
    return queryset.exclude(status=CANCELLED).filter(**{
        f'{model.DATE_FIELD}__gte': start_date,
        f'{model.DATE_FIELD}__lte': end_date,
    })


def summarize(records):
    statuses = [r.status for r in records]
    total = len(statuses)
    completed = statuses.count(COMPLETED)
    distances = [r.distance for r in records if r.distance is not None]
    return {
        'total_records': total,
        'completed_records': completed,
        'in_progress_records': statuses.count(IN_PROGRESS),
        'pending_records': statuses.count(PENDING),
        'completion_rate': completion_rate(completed, total),
        'total_distance': sum(distances),
    }


def _group_key(record, dimension):
    if dimension == 'driver':
        return record.driver_id, record.driver.name
    if dimension == 'vehicle':
        return record.vehicle_id, record.vehicle.vehicle_no
    if dimension == 'route':
        if record.route_id is None:
            return None
        return record.route_id, record.route.route_name
    if dimension == 'month':
        month = record.trip_date.strftime('%Y-%m')
        return month, month
    raise ValidationError(f'Unknown dimension "{dimension}". Use one of: {", ".join(DIMENSIONS)}.')


def completion_by(records, dimension):
    """
    Per-group record count, completed count and completion rate.

    Records without a route are skipped when grouping by route. Months are
    returned in calendar order, the other groupings by label.
    """
    groups = OrderedDict()
    for record in records:
        key = _group_key(record, dimension)
        if key is None:
            continue
        group_id, label = key
        group = groups.setdefault(group_id, {
            'id': group_id, 'label': label, 'total_records': 0, 'completed_records': 0,
        })
        group['total_records'] += 1
        if record.status == COMPLETED:
            group['completed_records'] += 1

    rows = list(groups.values())
    for row in rows:
        row['completion_rate'] = completion_rate(row['completed_records'], row['total_records'])
    rows.sort(key=lambda r: (str(r['label']), str(r['id'])))
    return rows


def _mean(values):
    if not values:
        return None
    return sum(values) / len(values)


def route_performance(model, queryset=None, today=None):
    """
    Compare each route's mean duration today with its mean this month.

    ``difference`` is today minus month in minutes; ``deviation_percent`` is
    that difference relative to the month mean, or None when either mean is
    missing or the month mean is zero.
    """
    today = today or timezone.localdate()
    month_start, month_end = month_bounds(today)
    records = records_between(model, month_start, month_end, queryset).filter(
        route__isnull=False
    ).select_related('route')

    per_route = OrderedDict()
    for record in records:
        duration = record.duration_minutes
        if duration is None:
            continue
        entry = per_route.setdefault(record.route_id, {'route': record.route, 'month': [], 'today': []})
        entry['month'].append(duration)
        if record.trip_date == today:
            entry['today'].append(duration)

    rows = []
    for route_id, entry in per_route.items():
        month_avg = _mean(entry['month'])
        today_avg = _mean(entry['today'])
        difference = deviation = None
        if month_avg is not None and today_avg is not None:
            difference = round(today_avg - month_avg, 1)
            if month_avg:
                deviation = round((today_avg - month_avg) / month_avg * 100, 1)
        rows.append({
            'route_id': route_id,
            'route_name': entry['route'].route_name,
            'month_average_minutes': round(month_avg, 1) if month_avg is not None else None,
            'today_average_minutes': round(today_avg, 1) if today_avg is not None else None,
            'difference_minutes': difference,
            'deviation_percent': deviation,
            'month_count': len(entry['month']),
            'today_count': len(entry['today']),
        })
    rows.sort(key=lambda r: r['route_name'])
    logger.debug(f"Route performance computed for {len(rows)} routes")
    return rows


def build_report(model, start_date, end_date, queryset=None):
    records = list(
        records_between(model, start_date, end_date, queryset).select_related('driver', 'vehicle', 'route')
    )
    return {
        'record_type': model.RECORD_TYPE,
        'start_date': start_date,
        'end_date': end_date,
        'summary': summarize(records),
        'by_driver': completion_by(records, 'driver'),
        'by_vehicle': completion_by(records, 'vehicle'),
        'by_route': completion_by(records, 'route'),
        'by_month': completion_by(records, 'month'),
    }
