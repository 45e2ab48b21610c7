import csv
import datetime
import io

from django.test import TestCase

from accounts.tests.helpers import make_code, make_driver, make_route, make_vehicle
from reports.services.csv_export import COLUMNS, export_filename, render_records_csv
from trips.models import COMPLETED, DeliveryRecord


class CsvExportTest(TestCase):

    def setUp(self):
        code = make_code()
        driver = make_driver(code, name='Taro, "T" Yamada')
        route = make_route(code)
        self.records = [
            DeliveryRecord.objects.create(
                driver=driver, vehicle=make_vehicle(code, vehicle_no=f'V{i}'), route=route,
                delivery_date=datetime.date(2026, 10, 19), start_time=datetime.time(8, 0),
                start_odometer=100, status=COMPLETED
            )
            for i in range(3)
        ]

    def test_bom_header_and_rows(self):
        content = render_records_csv(self.records, 'delivery')
        self.assertTrue(content.startswith('\ufeff'))

        rows = list(csv.reader(io.StringIO(content[1:])))
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[0], [header for header, _ in COLUMNS['delivery']])
        self.assertEqual(rows[1][1], 'Taro, "T" Yamada')
        self.assertEqual(rows[1][4], '08:00')
        # missing end time and odometer
        self.assertEqual(rows[1][5], '')
        self.assertEqual(rows[1][7], '')

    def test_every_field_is_quoted(self):
        content = render_records_csv(self.records[:1], 'delivery')
        header_line = content[1:].split('\r\n')[0]
        expected = ",".join(f'"{header}"' for header, _ in COLUMNS['delivery'])
        self.assertEqual(header_line, expected)
        self.assertTrue(content[1:].split('\r\n')[1].startswith('"2026-10-19"'))

    def test_empty_export_has_header_only(self):
        content = render_records_csv([], 'transportation')
        rows = list(csv.reader(io.StringIO(content[1:])))
        self.assertEqual(len(rows), 1)

    def test_filename(self):
        self.assertEqual(
            export_filename('delivery', datetime.date(2026, 10, 19)),
            'delivery_records_2026-10-19.csv'
        )
