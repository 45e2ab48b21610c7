import datetime

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from accounts.tests.helpers import make_code, make_driver, make_route, make_vehicle
from reports.services.aggregation import (
    build_report,
    completion_by,
    completion_rate,
    resolve_period,
    route_performance,
)
from trips.models import CANCELLED, COMPLETED, IN_PROGRESS, DeliveryRecord, TransportationRecord

TODAY = datetime.date(2026, 10, 19)


class CompletionRateTest(SimpleTestCase):

    def test_no_records(self):
        self.assertEqual(completion_rate(0, 0), 0)

    def test_rounds_half_up(self):
        self.assertEqual(completion_rate(1, 8), 13)   # 12.5
        self.assertEqual(completion_rate(1, 3), 33)
        self.assertEqual(completion_rate(2, 3), 67)
        self.assertEqual(completion_rate(5, 5), 100)


class ResolvePeriodTest(SimpleTestCase):

    def test_current_month(self):
        self.assertEqual(
            resolve_period('current_month', today=TODAY),
            (datetime.date(2026, 10, 1), datetime.date(2026, 10, 31))
        )

    def test_last_month_across_year(self):
        self.assertEqual(
            resolve_period('last_month', today=datetime.date(2026, 1, 15)),
            (datetime.date(2025, 12, 1), datetime.date(2025, 12, 31))
        )

    def test_custom(self):
        self.assertEqual(
            resolve_period('custom', '2026-02-01', '2026-02-10'),
            (datetime.date(2026, 2, 1), datetime.date(2026, 2, 10))
        )

    def test_invalid(self):
        with self.assertRaises(ValidationError):
            resolve_period('custom', '2026-02-10', '2026-02-01')
        with self.assertRaises(ValidationError):
            resolve_period('custom', '2026-02-10', None)
        with self.assertRaises(ValidationError):
            resolve_period('fortnight')


class AggregationTest(TestCase):

    def setUp(self):
        code = make_code()
        self.driver_a = make_driver(code, employee_no='D001', name='Aoki')
        self.driver_b = make_driver(code, employee_no='D002', name='Baba')
        self.vehicle = make_vehicle(code)
        self.route = make_route(code)

        def record(driver, day, status, route=None, start=None, end=None):
            return TransportationRecord.objects.create(
                driver=driver, vehicle=self.vehicle, route=route, transportation_date=day,
                status=status, start_time=start, end_time=end
            )

        record(self.driver_a, datetime.date(2026, 10, 1), COMPLETED, self.route)
        record(self.driver_a, datetime.date(2026, 10, 2), IN_PROGRESS, self.route)
        record(self.driver_a, datetime.date(2026, 10, 3), CANCELLED, self.route)
        record(self.driver_b, datetime.date(2026, 10, 2), COMPLETED)
        # Outside the period
        record(self.driver_b, datetime.date(2026, 9, 30), COMPLETED)

    def test_summary_and_groupings(self):
        report = build_report(TransportationRecord, datetime.date(2026, 10, 1), datetime.date(2026, 10, 31))
        self.assertEqual(report['summary']['total_records'], 3)
        self.assertEqual(report['summary']['completed_records'], 2)
        self.assertEqual(report['summary']['completion_rate'], 67)

        by_driver = {row['label']: row for row in report['by_driver']}
        self.assertEqual(by_driver['Aoki']['total_records'], 2)
        self.assertEqual(by_driver['Aoki']['completion_rate'], 50)
        self.assertEqual(by_driver['Baba']['completion_rate'], 100)

    def test_route_grouping_skips_records_without_route(self):
        records = TransportationRecord.objects.exclude(status=CANCELLED)
        rows = completion_by(records, 'route')
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['total_records'], 2)

    def test_month_grouping(self):
        records = TransportationRecord.objects.exclude(status=CANCELLED)
        rows = completion_by(records, 'month')
        self.assertEqual([r['label'] for r in rows], ['2026-09', '2026-10'])


class RoutePerformanceTest(TestCase):

    def setUp(self):
        code = make_code()
        self.driver = make_driver(code)
        self.route = make_route(code)
        self.vehicles = [make_vehicle(code, vehicle_no=f'V{i}') for i in range(3)]

    def add(self, vehicle, day, start, end):
        DeliveryRecord.objects.create(
            driver=self.driver, vehicle=vehicle, route=self.route, delivery_date=day,
            start_time=start, end_time=end, status=COMPLETED
        )

    def test_deviation(self):
        # month mean (60 + 80 + 100) / 3 = 80, today 100
        self.add(self.vehicles[0], datetime.date(2026, 10, 1), datetime.time(8, 0), datetime.time(9, 0))
        self.add(self.vehicles[1], datetime.date(2026, 10, 5), datetime.time(8, 0), datetime.time(9, 20))
        self.add(self.vehicles[2], TODAY, datetime.time(8, 0), datetime.time(9, 40))

        rows = route_performance(DeliveryRecord, today=TODAY)
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row['month_average_minutes'], 80.0)
        self.assertEqual(row['today_average_minutes'], 100.0)
        self.assertEqual(row['difference_minutes'], 20.0)
        self.assertEqual(row['deviation_percent'], 25.0)

    def test_no_run_today(self):
        self.add(self.vehicles[0], datetime.date(2026, 10, 1), datetime.time(8, 0), datetime.time(9, 0))
        row = route_performance(DeliveryRecord, today=TODAY)[0]
        self.assertIsNone(row['today_average_minutes'])
        self.assertIsNone(row['deviation_percent'])
