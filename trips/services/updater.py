"""
Field-level writes of clock times and odometer readings.

A write stores the value, reports advisory warnings (end before start,
departure before arrival) and completes the record once every tracked field
is filled.
"""
import logging
from collections import namedtuple

from django.core.exceptions import ValidationError
from django.db import transaction

from fleet.services.odometer import update_vehicle_odometer
from trips.models import CANCELLED, COMPLETED, IN_PROGRESS, PENDING
from trips.services.timeutils import parse_clock_time

logger = logging.getLogger(__name__)

TIME = 'time'
ODOMETER = 'odometer'

RECORD_FIELDS = {
    'start_time': TIME,
    'end_time': TIME,
    'start_odometer': ODOMETER,
    'end_odometer': ODOMETER,
}
DETAIL_FIELDS = {
    'arrival_time': TIME,
    'departure_time': TIME,
}
# Transportation details also track pickup and drop-off; these never gate completion
EXTRA_DETAIL_FIELDS = {
    'transportation': {
        'pickup_time': TIME,
        'drop_off_time': TIME,
    },
}

UpdateResult = namedtuple('UpdateResult', ['record', 'warnings', 'completed'])


def parse_value(kind, value):
    if value in (None, ''):
        return None
    if kind == TIME:
        return parse_clock_time(value)
    if isinstance(value, bool):
        raise ValidationError('Odometer must be a non-negative integer.')
    try:
        odometer = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError('Odometer must be a non-negative integer.')
    if odometer < 0:
        raise ValidationError('Odometer must be a non-negative integer.')
    return odometer


def record_warnings(record):
    warnings = []
    if record.start_time and record.end_time and record.end_time < record.start_time:
        warnings.append('End time is earlier than start time; treated as crossing midnight.')
    if record.start_odometer is not None and record.end_odometer is not None \
            and record.end_odometer < record.start_odometer:
        warnings.append('End odometer is less than start odometer.')
    return warnings


def detail_warnings(detail):
    if detail.arrival_time and detail.departure_time and detail.departure_time < detail.arrival_time:
        return ['Departure time is earlier than arrival time.']
    return []


def is_record_filled(record):
    """True when the record's times and odometers and every detail's times are set."""
    if any(getattr(record, field) is None for field in RECORD_FIELDS):
        return False
    return not record.details.filter(arrival_time__isnull=True).exists() and \
        not record.details.filter(departure_time__isnull=True).exists()


def _check_editable(record):
    if record.status == CANCELLED:
        raise ValidationError('Cancelled records cannot be updated.')


def complete_if_filled(record):
    """
    Flip an in-progress record to completed when nothing is pending and move
    the vehicle's odometer to the record's end reading.

    A record whose end odometer is below its start stays in progress until
    the reading is corrected, as ``complete_record`` refuses it too.
    """
    if record.status != IN_PROGRESS or not is_record_filled(record):
        return False
    if record.end_odometer < record.start_odometer:
        logger.warning(f"{record.RECORD_TYPE} record {record.id} held open: end odometer below start")
        return False
    record.status = COMPLETED
    record.save(update_fields=['status', 'updated_at'])
    update_vehicle_odometer(record.vehicle, record.end_odometer)
    logger.info(f"{record.RECORD_TYPE.capitalize()} record {record.id} completed at {record.end_odometer} km")
    return True


@transaction.atomic
def update_record_field(record, field, value):
    kind = RECORD_FIELDS.get(field)
    if kind is None:
        raise ValidationError(f'Field "{field}" cannot be updated. Allowed: {", ".join(RECORD_FIELDS)}.')
    _check_editable(record)

    setattr(record, field, parse_value(kind, value))
    update_fields = [field, 'updated_at']
    if record.status == PENDING and field.startswith('start_') and getattr(record, field) is not None:
        record.status = IN_PROGRESS
        update_fields.append('status')
    record.save(update_fields=update_fields)

    warnings = record_warnings(record)
    for warning in warnings:
        logger.warning(f"{record.RECORD_TYPE} record {record.id}: {warning}")
    return UpdateResult(record, warnings, complete_if_filled(record))


@transaction.atomic
def update_detail_field(detail, field, value):
    record = detail.record
    allowed = dict(DETAIL_FIELDS, **EXTRA_DETAIL_FIELDS.get(record.RECORD_TYPE, {}))
    kind = allowed.get(field)
    if kind is None:
        raise ValidationError(f'Field "{field}" cannot be updated. Allowed: {", ".join(allowed)}.')
    _check_editable(record)

    setattr(detail, field, parse_value(kind, value))
    detail.save(update_fields=[field, 'updated_at'])

    if record.status == PENDING and field == 'arrival_time' and detail.arrival_time is not None:
        record.status = IN_PROGRESS
        record.save(update_fields=['status', 'updated_at'])

    warnings = detail_warnings(detail)
    for warning in warnings:
        logger.warning(f"{record.RECORD_TYPE} detail {detail.id}: {warning}")
    return UpdateResult(record, warnings, complete_if_filled(record))


@transaction.atomic
def complete_record(record, end_time=None, end_odometer=None):
    """
    Explicitly complete an in-progress record.

    Unlike field updates this rejects an end odometer below the start.
    """
    end_time = parse_value(TIME, end_time)
    end_odometer = parse_value(ODOMETER, end_odometer)
    record.mark_completed(end_time=end_time, end_odometer=end_odometer)
    if record.end_odometer is not None:
        update_vehicle_odometer(record.vehicle, record.end_odometer)
    logger.info(f"{record.RECORD_TYPE.capitalize()} record {record.id} completed")
    return record


@transaction.atomic
def start_record(record, start_time=None, start_odometer=None):
    record.mark_in_progress(
        start_time=parse_value(TIME, start_time),
        start_odometer=parse_value(ODOMETER, start_odometer),
    )
    return record
