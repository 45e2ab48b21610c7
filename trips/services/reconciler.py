"""
Find-or-create of the day's trip record.

A record is identified by its natural key (delivery: driver, vehicle, route
and date; transportation: driver, vehicle and date). The database holds at
most one non-cancelled row per key, so concurrent requests for the same key
resolve to the same record through ``get_or_create``.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from trips.models import (
    CANCELLED,
    COMPLETED,
    IN_PROGRESS,
    DeliveryDetail,
    DeliveryRecord,
    TransportationDetail,
    TransportationRecord,
)
from trips.services.odometer import vehicle_odometer

logger = logging.getLogger(__name__)


def populate_delivery_details(record):
    """One detail per active route destination, in visiting order."""
    existing = set(record.details.values_list('destination_id', flat=True))
    next_sequence = len(existing) + 1
    details = []
    for destination in record.route.active_destinations():
        if destination.id in existing:
            continue
        details.append(DeliveryDetail(record=record, destination=destination, sequence=next_sequence))
        next_sequence += 1
    DeliveryDetail.objects.bulk_create(details)
    return len(details)


def populate_transportation_details(record, riders):
    """Append a detail for each rider not yet on the record."""
    existing = set(record.details.values_list('rider_id', flat=True))
    next_sequence = len(existing) + 1
    details = []
    for rider in riders:
        if rider.id in existing:
            continue
        existing.add(rider.id)
        address = rider.primary_address
        details.append(TransportationDetail(
            record=record,
            rider=rider,
            sequence=next_sequence,
            pickup_address=address.address if address else '',
        ))
        next_sequence += 1
    TransportationDetail.objects.bulk_create(details)
    if details:
        record.passenger_count = len(existing)
        record.save(update_fields=['passenger_count', 'updated_at'])
    return len(details)


@transaction.atomic
def reconcile_delivery_record(driver, vehicle, route, delivery_date=None, start_time=None):
    """
    Return ``(record, created)`` for the active delivery record of this key,
    creating it in progress with one detail per destination when absent.
    """
    if route is None:
        raise ValidationError('A route is required for delivery records.')
    delivery_date = delivery_date or timezone.localdate()

    record, created = DeliveryRecord.objects.exclude(status=CANCELLED).get_or_create(
        driver=driver,
        vehicle=vehicle,
        route=route,
        delivery_date=delivery_date,
        defaults={
            'status': IN_PROGRESS,
            'start_time': start_time,
            'start_odometer': vehicle_odometer(vehicle),
        },
    )
    if created:
        count = populate_delivery_details(record)
        logger.info(
            f"Created delivery record {record.id} for driver {driver.employee_no}, "
            f"route {route.route_code} on {delivery_date} with {count} destinations"
        )
    else:
        logger.debug(f"Reusing delivery record {record.id}")
    return record, created


@transaction.atomic
def reconcile_transportation_record(driver, vehicle, transportation_date=None, route=None, riders=None,
                                    start_time=None):
    """
    Return ``(record, created)`` for the active transportation record of this
    key. Riders not yet on the record get a detail row unless it is completed.
    """
    transportation_date = transportation_date or timezone.localdate()
    riders = list(riders or [])

    record, created = TransportationRecord.objects.exclude(status=CANCELLED).get_or_create(
        driver=driver,
        vehicle=vehicle,
        transportation_date=transportation_date,
        defaults={
            'status': IN_PROGRESS,
            'route': route,
            'start_time': start_time,
            'start_odometer': vehicle_odometer(vehicle),
        },
    )
    if record.status == COMPLETED:
        # completed records never reopen, so late riders are not added
        if riders:
            logger.warning(f"Transportation record {record.id} is completed; riders not added")
        return record, created

    added = populate_transportation_details(record, riders)
    if created:
        logger.info(
            f"Created transportation record {record.id} for driver {driver.employee_no} "
            f"on {transportation_date} with {added} riders"
        )
    elif added:
        logger.info(f"Added {added} riders to transportation record {record.id}")
    return record, created


def reconcile_for_session(session, record_type, on_date=None):
    """Reconcile the record of the given type for a driver session."""
    if record_type == DeliveryRecord.RECORD_TYPE:
        return reconcile_delivery_record(
            session.driver, session.vehicle, session.route,
            delivery_date=on_date, start_time=session.start_time,
        )
    if record_type == TransportationRecord.RECORD_TYPE:
        return reconcile_transportation_record(
            session.driver, session.vehicle,
            transportation_date=on_date, route=session.route,
            riders=session.riders.all(), start_time=session.start_time,
        )
    raise ValidationError(f'Unknown record type "{record_type}".')


@transaction.atomic
def recreate_record(record):
    """
    Cancel ``record`` and reconcile a fresh one for the same key.

    Recovery path for a record that was created with wrong data.
    """
    record.mark_cancelled()
    if isinstance(record, DeliveryRecord):
        new_record, _ = reconcile_delivery_record(
            record.driver, record.vehicle, record.route,
            delivery_date=record.delivery_date, start_time=record.start_time,
        )
    else:
        riders = [detail.rider for detail in record.details.select_related('rider').order_by('sequence')]
        new_record, _ = reconcile_transportation_record(
            record.driver, record.vehicle,
            transportation_date=record.transportation_date, route=record.route,
            riders=riders, start_time=record.start_time,
        )
    logger.info(f"Recreated {record.RECORD_TYPE} record {record.id} as {new_record.id}")
    return new_record
