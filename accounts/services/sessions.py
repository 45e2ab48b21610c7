import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.crypto import get_random_string

from accounts.models import DriverSession, ManagementCode

logger = logging.getLogger(__name__)


def _new_token():
    return get_random_string(getattr(settings, 'DRIVER_SESSION_TOKEN_LENGTH', 48))


@transaction.atomic
def start_driver_session(code, employee_no, pin_code, vehicle_id, route_id=None, rider_ids=None, start_time=None):
    """
    Authenticate a driver against a management code and open a session.

    Raises:
        ValidationError: unknown/inactive code, bad credentials, or a vehicle,
            route or rider outside the code's scope.
    """
    from fleet.models import Driver, Vehicle
    from routes.models import Route
    from riders.models import Rider
    from trips.services.odometer import vehicle_odometer

    try:
        management_code = ManagementCode.objects.get(code=code, is_active=True)
    except ManagementCode.DoesNotExist:
        logger.warning(f"Driver login with unknown or inactive management code {code!r}")
        raise ValidationError('Invalid management code.')

    driver = Driver.objects.filter(
        management_code=management_code, employee_no=employee_no, is_active=True
    ).first()
    if driver is None or (driver.pin_code and driver.pin_code != (pin_code or '')):
        logger.warning(f"Driver login failed for employee {employee_no!r} under {code}")
        raise ValidationError('Invalid employee number or PIN code.')

    try:
        vehicle = Vehicle.objects.get(pk=vehicle_id, management_code=management_code, is_active=True)
    except (Vehicle.DoesNotExist, ValueError, TypeError):
        raise ValidationError('Vehicle not found.')

    route = None
    if route_id:
        try:
            route = Route.objects.get(pk=route_id, management_code=management_code, is_active=True)
        except (Route.DoesNotExist, ValueError, TypeError):
            raise ValidationError('Route not found.')

    riders = []
    if rider_ids:
        riders = list(Rider.objects.filter(pk__in=rider_ids, management_code=management_code, is_active=True))
        if len(riders) != len(set(rider_ids)):
            raise ValidationError('One or more riders were not found.')

    session = DriverSession.objects.create(
        token=_new_token(),
        driver=driver,
        vehicle=vehicle,
        route=route,
        management_code=management_code,
        start_time=start_time,
        start_odometer=vehicle_odometer(vehicle),
    )
    if riders:
        session.riders.set(riders)

    logger.info(f"Driver session opened for {driver.employee_no} on vehicle {vehicle.vehicle_no}")
    return session


def update_driver_session(session, route=None, riders=None, start_time=None):
    """Change the route, rider selection or start time of an open session."""
    if route is not None and route.management_code_id != session.management_code_id:
        raise ValidationError('Route not found.')
    if riders is not None and any(r.management_code_id != session.management_code_id for r in riders):
        raise ValidationError('One or more riders were not found.')

    update_fields = ['updated_at']
    if route is not None:
        session.route = route
        update_fields.append('route')
    if start_time is not None:
        session.start_time = start_time
        update_fields.append('start_time')
    session.save(update_fields=update_fields)

    if riders is not None:
        session.riders.set(riders)
    return session


def end_driver_session(session):
    session.end()
    logger.info(f"Driver session {session.pk} ended")
