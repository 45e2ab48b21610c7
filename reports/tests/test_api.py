import datetime

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from accounts.tests.helpers import admin_client, driver_client, make_admin, make_code, make_driver, make_vehicle
from trips.models import COMPLETED, IN_PROGRESS, TransportationRecord


class ReportAPITest(TestCase):
    """Integration tests for the report endpoints."""

    def setUp(self):
        self.code = make_code()
        self.other_code = make_code(org_name='Other Care')
        today = timezone.localdate()
        for code, suffix, state in ((self.code, 'A', COMPLETED), (self.other_code, 'B', IN_PROGRESS)):
            TransportationRecord.objects.create(
                driver=make_driver(code, employee_no=f'D-{suffix}'),
                vehicle=make_vehicle(code, vehicle_no=f'V-{suffix}'),
                transportation_date=today, status=state,
                start_time=datetime.time(8, 0), end_time=datetime.time(8, 50),
            )
        self.client = admin_client(make_admin(self.code))

    def test_summary_is_scoped(self):
        response = self.client.get('/api/reports/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['record_type'], 'transportation')
        self.assertEqual(response.data['summary']['total_records'], 1)
        self.assertEqual(response.data['summary']['completion_rate'], 100)

    def test_summary_for_deliveries(self):
        response = self.client.get('/api/reports/summary/', {'record_type': 'delivery'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_records'], 0)
        self.assertEqual(response.data['summary']['completion_rate'], 0)

    def test_invalid_parameters(self):
        response = self.client.get('/api/reports/summary/', {'record_type': 'parcels'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/reports/summary/', {'period': 'custom', 'start': '2026-10-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/reports/completion/', {'dimension': 'weather'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_completion_by_vehicle(self):
        response = self.client.get('/api/reports/completion/', {'dimension': 'vehicle'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['label'] for row in response.data['rows']], ['V-A'])

    def test_route_performance_without_routes(self):
        response = self.client.get('/api/reports/route-performance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['routes'], [])

    def test_csv_export(self):
        response = self.client.get('/api/reports/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv; charset=utf-8')
        filename = f'transportation_records_{timezone.localdate().isoformat()}.csv'
        self.assertIn(filename, response['Content-Disposition'])

        lines = response.content.decode('utf-8-sig').strip().split('\r\n')
        self.assertEqual(len(lines), 2)
        self.assertIn('"Care Van"', lines[1])

    def test_drivers_cannot_read_reports(self):
        client, _ = driver_client(make_driver(self.code, employee_no='D-C'), make_vehicle(self.code, vehicle_no='V-C'))
        response = client.get('/api/reports/summary/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_health_check_is_public(self):
        response = self.client_class().get('/api/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'status': 'healthy'})
