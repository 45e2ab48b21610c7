from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings

from accounts.tests.helpers import make_code, make_vehicle
from fleet.services.odometer import record_oil_change, update_vehicle_odometer
from fleet.services.oil_change import oil_change_status, oil_change_summary


class OilChangeStatusTest(SimpleTestCase):
    """Threshold checks of the oil-change status."""

    def test_thresholds(self):
        self.assertEqual(oil_change_status(13999, 10000), 'normal')
        self.assertEqual(oil_change_status(14000, 10000), 'due_soon')
        self.assertEqual(oil_change_status(14999, 10000), 'due_soon')
        self.assertEqual(oil_change_status(15000, 10000), 'needs_change')
        self.assertEqual(oil_change_status(20000, 10000), 'needs_change')

    def test_missing_readings_are_normal(self):
        self.assertEqual(oil_change_status(None, 10000), 'normal')
        self.assertEqual(oil_change_status(12000, None), 'normal')

    @override_settings(OIL_CHANGE_INTERVAL_KM=3000, OIL_CHANGE_WARNING_KM=2500)
    def test_thresholds_follow_settings(self):
        self.assertEqual(oil_change_status(2600, 0), 'due_soon')
        self.assertEqual(oil_change_status(3000, 0), 'needs_change')


class VehicleModelTest(TestCase):
    """Unit tests for the Vehicle model and odometer services."""

    def setUp(self):
        self.vehicle = make_vehicle(make_code(), current_odometer=24500, last_oil_change_odometer=20000)

    def test_vehicle_fields_and_defaults(self):
        v = self.vehicle
        self.assertEqual(v.vehicle_no, "V001")
        self.assertEqual(v.vehicle_type, "van")
        self.assertFalse(v.wheelchair_accessible)
        self.assertTrue(v.is_active)
        self.assertEqual(v.oil_change_status, 'due_soon')

    def test_summary(self):
        summary = oil_change_summary(self.vehicle)
        self.assertEqual(summary['km_since_oil_change'], 4500)
        self.assertEqual(summary['next_oil_change_odometer'], 25000)
        self.assertEqual(summary['km_remaining'], 500)

    def test_record_oil_change(self):
        record_oil_change(self.vehicle, 24500)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.last_oil_change_odometer, 24500)
        self.assertEqual(self.vehicle.oil_change_status, 'normal')

    def test_record_oil_change_raises_current_odometer(self):
        record_oil_change(self.vehicle, 25100)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.current_odometer, 25100)

    def test_record_oil_change_validation(self):
        for value in (0, 19000, 20000, 'abc'):
            with self.assertRaises(ValidationError):
                record_oil_change(self.vehicle, value)

    def test_update_odometer(self):
        update_vehicle_odometer(self.vehicle, '26000')
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.current_odometer, 26000)
        with self.assertRaises(ValidationError):
            update_vehicle_odometer(self.vehicle, -1)
