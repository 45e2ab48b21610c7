import datetime

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from accounts.tests.helpers import (
    admin_client, driver_client, make_admin, make_code, make_driver, make_rider, make_route, make_vehicle
)
from trips.models import (
    CANCELLED, COMPLETED, IN_PROGRESS, DeliveryRecord, TransportationDetail, TransportationRecord
)


class DeliveryRecordAPITest(TestCase):
    """Integration tests for the delivery record endpoints."""

    def setUp(self):
        self.code = make_code()
        self.driver = make_driver(self.code)
        self.vehicle = make_vehicle(self.code, current_odometer=5000)
        self.route = make_route(self.code)
        self.client, self.session = driver_client(self.driver, self.vehicle, route=self.route, start_time='08:00')

    def test_today_creates_then_reuses(self):
        response = self.client.get('/api/trips/delivery-records/today/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['created'])
        record_id = response.data['record']['id']
        self.assertEqual(response.data['record']['start_odometer'], 5000)
        self.assertEqual(len(response.data['record']['details']), 2)

        response = self.client.get('/api/trips/delivery-records/today/')
        self.assertFalse(response.data['created'])
        self.assertEqual(response.data['record']['id'], record_id)
        self.assertEqual(DeliveryRecord.objects.count(), 1)

    def test_today_without_route(self):
        client, _ = driver_client(self.driver, self.vehicle)
        response = client.get('/api/trips/delivery-records/today/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_explicit_create_of_duplicate_returns_conflict(self):
        record_id = self.client.get('/api/trips/delivery-records/today/').data['record']['id']
        payload = {
            'vehicle': self.vehicle.id,
            'route': self.route.id,
            'delivery_date': timezone.localdate().isoformat(),
        }
        response = self.client.post('/api/trips/delivery-records/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'DUPLICATE_RECORD')
        self.assertEqual(response.data['existing_record']['id'], record_id)

    def test_explicit_create(self):
        payload = {
            'vehicle': self.vehicle.id,
            'route': self.route.id,
            'delivery_date': '2026-10-01',
        }
        response = self.client.post('/api/trips/delivery-records/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['driver'], self.driver.id)
        self.assertEqual(len(response.data['details']), 2)

    def test_update_field_reports_warning(self):
        record_id = self.client.get('/api/trips/delivery-records/today/').data['record']['id']
        response = self.client.post(
            f'/api/trips/delivery-records/{record_id}/update_field/',
            {'field': 'end_odometer', 'value': 4000},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['warnings']), 1)
        self.assertFalse(response.data['completed'])

    def test_update_field_rejects_bad_value(self):
        record_id = self.client.get('/api/trips/delivery-records/today/').data['record']['id']
        response = self.client.post(
            f'/api/trips/delivery-records/{record_id}/update_field/',
            {'field': 'start_time', 'value': 'soon'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_full_run_completes_record(self):
        record = self.client.get('/api/trips/delivery-records/today/').data['record']
        for detail in record['details']:
            url = f"/api/trips/delivery-details/{detail['id']}/"
            self.assertEqual(self.client.post(url + 'arrive/', {'time': '08:30'}, format='json').status_code, 200)
            self.assertEqual(self.client.post(url + 'depart/', {'time': '08:40'}, format='json').status_code, 200)

        url = f"/api/trips/delivery-records/{record['id']}/update_field/"
        self.client.post(url, {'field': 'end_time', 'value': '09:30'}, format='json')
        response = self.client.post(url, {'field': 'end_odometer', 'value': 5035}, format='json')

        self.assertTrue(response.data['completed'])
        self.assertEqual(response.data['record']['status'], COMPLETED)
        self.assertEqual(response.data['record']['distance'], 35)
        self.assertEqual(response.data['record']['duration_minutes'], 90)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.current_odometer, 5035)

    def test_complete_rejects_lower_odometer(self):
        record_id = self.client.get('/api/trips/delivery-records/today/').data['record']['id']
        response = self.client.post(
            f'/api/trips/delivery-records/{record_id}/complete/',
            {'end_time': '12:00', 'end_odometer': 4999},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'End odometer must not be less than start odometer.')

    def test_delete_cancels(self):
        record_id = self.client.get('/api/trips/delivery-records/today/').data['record']['id']
        response = self.client.delete(f'/api/trips/delivery-records/{record_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        record = DeliveryRecord.objects.get(pk=record_id)
        self.assertEqual(record.status, CANCELLED)

    def test_recreate(self):
        record_id = self.client.get('/api/trips/delivery-records/today/').data['record']['id']
        response = self.client.post(f'/api/trips/delivery-records/{record_id}/recreate/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotEqual(response.data['id'], record_id)
        self.assertEqual(DeliveryRecord.objects.exclude(status=CANCELLED).count(), 1)

    def test_cancel_twice(self):
        record_id = self.client.get('/api/trips/delivery-records/today/').data['record']['id']
        self.client.post(f'/api/trips/delivery-records/{record_id}/cancel/')
        response = self.client.post(f'/api/trips/delivery-records/{record_id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_driver_sees_only_own_records(self):
        other_driver = make_driver(self.code, employee_no='D002', name='Other')
        DeliveryRecord.objects.create(
            driver=other_driver, vehicle=self.vehicle, route=self.route, delivery_date=datetime.date(2026, 1, 5)
        )
        self.client.get('/api/trips/delivery-records/today/')
        response = self.client.get('/api/trips/delivery-records/')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['driver'], self.driver.id)


class RecordScopeAPITest(TestCase):
    """Records are scoped through the driver's management code."""

    def setUp(self):
        self.code_a = make_code()
        self.code_b = make_code(org_name='Other Care')
        for code, suffix in ((self.code_a, 'A'), (self.code_b, 'B')):
            TransportationRecord.objects.create(
                driver=make_driver(code, employee_no=f'D-{suffix}'),
                vehicle=make_vehicle(code, vehicle_no=f'V-{suffix}'),
                transportation_date=datetime.date(2026, 10, 1),
            )
        self.client = admin_client(make_admin(self.code_a))

    def test_admin_sees_only_own_codes(self):
        response = self.client.get('/api/trips/transportation-records/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['vehicle_no'] for r in response.data], ['V-A'])

    def test_other_code_record_is_not_found(self):
        record = TransportationRecord.objects.get(vehicle__vehicle_no='V-B')
        response = self.client.get(f'/api/trips/transportation-records/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_reconcile_with_riders(self):
        driver = make_driver(self.code_a, employee_no='D-A2')
        vehicle = make_vehicle(self.code_a, vehicle_no='V-A2')
        rider = make_rider(self.code_a)
        payload = {'driver': driver.id, 'vehicle': vehicle.id, 'riders': [rider.id], 'date': '2026-10-02'}

        response = self.client.post('/api/trips/transportation-records/reconcile/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['created'])
        self.assertEqual(len(response.data['record']['details']), 1)

        response = self.client.post('/api/trips/transportation-records/reconcile/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['created'])

    def test_admin_reconcile_with_foreign_vehicle(self):
        driver = make_driver(self.code_a, employee_no='D-A2')
        vehicle = TransportationRecord.objects.get(vehicle__vehicle_no='V-B').vehicle
        response = self.client.post(
            '/api/trips/transportation-records/reconcile/',
            {'driver': driver.id, 'vehicle': vehicle.id},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Vehicle not found.')


class TransportationSessionAPITest(TestCase):

    def test_today_uses_session_riders(self):
        code = make_code()
        riders = [make_rider(code), make_rider(code, user_no='U002', name='Jiro Suzuki')]
        client, _ = driver_client(make_driver(code), make_vehicle(code), riders=riders)

        response = client.get('/api/trips/transportation-records/today/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            sorted(d['rider'] for d in response.data['record']['details']),
            sorted(r.id for r in riders)
        )


class TransportationCreateAPITest(TestCase):
    """Explicit creation of transportation records with a rider selection."""

    def setUp(self):
        self.code = make_code()
        self.vehicle = make_vehicle(self.code)
        self.rider = make_rider(self.code)
        self.client, _ = driver_client(make_driver(self.code), self.vehicle)
        self.payload = {'vehicle': self.vehicle.id, 'transportation_date': '2026-10-01'}

    def test_create_with_riders(self):
        response = self.client.post(
            '/api/trips/transportation-records/', {**self.payload, 'riders': [self.rider.id]}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual([d['rider'] for d in response.data['details']], [self.rider.id])

    def test_scalar_riders_is_rejected(self):
        response = self.client.post(
            '/api/trips/transportation-records/', {**self.payload, 'riders': 5}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('riders', response.data)
        self.assertEqual(TransportationRecord.objects.count(), 0)

    def test_non_integer_rider_is_rejected(self):
        response = self.client.post(
            '/api/trips/transportation-records/', {**self.payload, 'riders': ['abc']}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('riders', response.data)
        self.assertEqual(TransportationRecord.objects.count(), 0)


class RecordFilterAPITest(TestCase):

    def setUp(self):
        code = make_code()
        TransportationRecord.objects.create(
            driver=make_driver(code), vehicle=make_vehicle(code), transportation_date=datetime.date(2026, 10, 1)
        )
        self.client = admin_client(make_admin(code))

    def test_date_range_filter(self):
        response = self.client.get('/api/trips/transportation-records/?date_from=2026-10-02')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 0)

    def test_malformed_date_is_rejected(self):
        response = self.client.get('/api/trips/transportation-records/?date_from=yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Invalid date', response.data['error'])


class DetailDestinationScopeAPITest(TestCase):
    """A detail's destination must stay within the caller's management codes."""

    def setUp(self):
        self.code = make_code()
        code_b = make_code(org_name='Other Care')
        record = TransportationRecord.objects.create(
            driver=make_driver(self.code), vehicle=make_vehicle(self.code),
            transportation_date=datetime.date(2026, 10, 1), status=IN_PROGRESS,
        )
        self.detail = TransportationDetail.objects.create(record=record, rider=make_rider(self.code), sequence=1)
        self.own_destination = make_route(self.code).destinations.first()
        self.foreign_destination = make_route(code_b, route_code='R-B').destinations.first()
        self.client = admin_client(make_admin(self.code))
        self.url = f'/api/trips/transportation-details/{self.detail.id}/'

    def test_own_destination_is_accepted(self):
        response = self.client.patch(self.url, {'destination': self.own_destination.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['destination'], self.own_destination.id)

    def test_foreign_destination_is_refused(self):
        response = self.client.patch(self.url, {'destination': self.foreign_destination.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.detail.refresh_from_db()
        self.assertIsNone(self.detail.destination_id)
