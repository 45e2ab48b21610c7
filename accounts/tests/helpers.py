"""Shared fixtures for API tests across the apps."""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.models import Admin, ManagementCode, Organization
from accounts.services.sessions import start_driver_session
from fleet.models import Driver, Vehicle
from riders.models import Rider, RiderAddress
from routes.models import Destination, Route


def make_code(org_name='Sunrise Care', code_name='Main'):
    organization = Organization.objects.create(name=org_name, email='office@example.com')
    return ManagementCode.objects.create(organization=organization, name=code_name)


def make_admin(management_code, username='admin'):
    user = get_user_model().objects.create_user(username=username, password='secret123')
    Admin.objects.create(user=user, organization=management_code.organization)
    return user


def make_driver(management_code, employee_no='D001', name='Taro Yamada', pin_code='1234'):
    return Driver.objects.create(
        name=name, employee_no=employee_no, pin_code=pin_code, management_code=management_code
    )


def make_vehicle(management_code, vehicle_no='V001', **kwargs):
    kwargs.setdefault('vehicle_name', 'Care Van')
    kwargs.setdefault('capacity', 8)
    return Vehicle.objects.create(vehicle_no=vehicle_no, management_code=management_code, **kwargs)


def make_route(management_code, route_code='R001', destinations=('Kita Home', 'Day Center'), **kwargs):
    kwargs.setdefault('route_name', 'Morning North')
    route = Route.objects.create(route_code=route_code, management_code=management_code, **kwargs)
    for order, name in enumerate(destinations, start=1):
        Destination.objects.create(route=route, name=name, display_order=order)
    return route


def make_rider(management_code, user_no='U001', name='Hanako Sato', address=None, **kwargs):
    rider = Rider.objects.create(user_no=user_no, name=name, management_code=management_code, **kwargs)
    if address:
        RiderAddress.objects.create(rider=rider, address=address)
    return rider


def admin_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def driver_client(driver, vehicle, route=None, riders=None, start_time=None):
    """Open a driver session and return (client, session) using its token."""
    session = start_driver_session(
        code=driver.management_code.code,
        employee_no=driver.employee_no,
        pin_code=driver.pin_code,
        vehicle_id=vehicle.pk,
        route_id=route.pk if route else None,
        rider_ids=[r.pk for r in riders] if riders else None,
        start_time=start_time,
    )
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Driver {session.token}')
    return client, session
