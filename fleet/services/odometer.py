import logging

from django.core.exceptions import ValidationError
from django.utils import timezone

from fleet.models import Vehicle

logger = logging.getLogger(__name__)


def _as_odometer(value) -> int:
    try:
        odometer = int(value)
    except (TypeError, ValueError):
        raise ValidationError('Odometer must be an integer.')
    if odometer < 0:
        raise ValidationError('Odometer must not be negative.')
    return odometer


def update_vehicle_odometer(vehicle: Vehicle, value):
    vehicle.current_odometer = _as_odometer(value)
    vehicle.updated_at = timezone.now()
    vehicle.save(update_fields=['current_odometer', 'updated_at'])
    logger.debug(f"Vehicle {vehicle.vehicle_no} odometer set to {vehicle.current_odometer}")
    return vehicle


def record_oil_change(vehicle: Vehicle, value):
    """
    Store the odometer reading at which the oil was changed.

    The reading must be positive and beyond the previous oil change. The
    current odometer is raised to match when it lags behind.
    """
    odometer = _as_odometer(value)
    if odometer <= 0:
        raise ValidationError('Oil change odometer must be greater than 0.')
    if vehicle.last_oil_change_odometer is not None and odometer <= vehicle.last_oil_change_odometer:
        raise ValidationError(
            f'Oil change odometer must be greater than the previous reading '
            f'({vehicle.last_oil_change_odometer} km).'
        )

    vehicle.last_oil_change_odometer = odometer
    update_fields = ['last_oil_change_odometer', 'updated_at']
    if vehicle.current_odometer is None or vehicle.current_odometer < odometer:
        vehicle.current_odometer = odometer
        update_fields.append('current_odometer')
    vehicle.save(update_fields=update_fields)
    logger.info(f"Oil change recorded for vehicle {vehicle.vehicle_no} at {odometer} km")
    return vehicle
