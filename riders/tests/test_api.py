from django.test import TestCase
from rest_framework import status

from accounts.tests.helpers import admin_client, driver_client, make_admin, make_code, make_driver, make_rider, make_vehicle


class RiderAPITest(TestCase):
    """Integration tests for Rider endpoints."""

    def setUp(self):
        self.code = make_code()
        self.other_code = make_code(org_name='Other Care')
        self.rider = make_rider(self.code, address='1-1 Kita', wheelchair_user=True)
        self.foreign_rider = make_rider(self.other_code, user_no='X001', name='Someone Else')
        self.client = admin_client(make_admin(self.code))

    def test_list_is_scoped(self):
        response = self.client.get('/api/riders/riders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['user_no'] for r in response.data], ['U001'])
        self.assertEqual(response.data[0]['primary_address'], '1-1 Kita')

    def test_filter_wheelchair_users(self):
        make_rider(self.code, user_no='U002', name='Walker')
        response = self.client.get('/api/riders/riders/', {'wheelchair_user': 'true'})
        self.assertEqual([r['user_no'] for r in response.data], ['U001'])

    def test_add_address(self):
        payload = {'address_type': 'school', 'address': '5-5 Gakuen', 'is_primary': True}
        response = self.client.post(f'/api/riders/riders/{self.rider.id}/addresses/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(f'/api/riders/riders/{self.rider.id}/')
        primary = [a for a in response.data['addresses'] if a['is_primary']]
        self.assertEqual([a['address'] for a in primary], ['5-5 Gakuen'])

    def test_address_for_foreign_rider_is_refused(self):
        payload = {'rider': self.foreign_rider.id, 'address': 'Nowhere'}
        response = self.client.post('/api/riders/addresses/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_driver_cannot_create_riders(self):
        client, _ = driver_client(make_driver(self.code), make_vehicle(self.code))
        response = client.post('/api/riders/riders/', {'user_no': 'U009', 'name': 'New'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
