"""
Integration tests for the hospital maintenance API.

These tests exercise the HTTP surface: status codes, the error body
rendered by the project exception handler, the check-only validation
endpoints and per-manager scoping.  They use Django REST Framework's
APIClient within the APITestCase base class.

To run the tests:

```
pytest -q perceptors/tests
```
"""

from unittest import mock

from django.core.cache import cache
from django.db import DatabaseError
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import Perceptor, PerceptorTransition
from .utils import hospital_payload, make_admin, make_manager, seed_catalogs


class HospitalAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        seed_catalogs()
        self.manager1_user, self.manager1 = make_manager('G001', 'manager1')
        self.manager2_user, self.manager2 = make_manager('G002', 'manager2')
        self.admin_user = make_admin()
        self.client1 = APIClient()
        self.client1.force_authenticate(user=self.manager1_user)
        self.client2 = APIClient()
        self.client2.force_authenticate(user=self.manager2_user)
        self.admin_client = APIClient()
        self.admin_client.force_authenticate(user=self.admin_user)

    def _call(self, client, method, url):
        if method == 'get':
            return client.get(url)
        return client.post(url, hospital_payload(), format='json')

    def _create(self, client=None, **overrides):
        resp = (client or self.client1).post('/api/hospitals/new', hospital_payload(**overrides), format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        return resp.data['data']

    def test_requires_authentication(self) -> None:
        resp = APIClient().get('/api/hospitals')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['ok'])

    def test_list_form(self) -> None:
        resp = self.client1.get('/api/hospitals')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['criteria'], {'category': 'H', 'manager': 'G001'})
        self.assertEqual(len(resp.data['catalogs']['priority']), 9)
        self.assertEqual(resp.data['catalogs']['status'][0], {'code': 'ACTIVE', 'label': 'Active'})

    def test_new_form(self) -> None:
        resp = self.client1.get('/api/hospitals/new')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['action'], 'new')
        self.assertIn('specialty', resp.data['catalogs'])

    def test_create(self) -> None:
        resp = self.client1.post('/api/hospitals/new', hospital_payload(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.data['ok'])
        self.assertEqual(resp.data['message'], 'Hospital H/1001 created.')
        data = resp.data['data']
        self.assertEqual((data['id'], data['status'], data['manager'], data['version']), ('H/1001', 'ACTIVE', 'G001', 1))
        self.assertEqual(data['details']['taxId'], 'Q2866004A')

    def test_create_ignores_identity_and_status_in_payload(self) -> None:
        data = self._create(category='X', code=7, status='SEIZED')
        self.assertEqual((data['category'], data['code'], data['status']), ('H', 1001, 'ACTIVE'))

    def test_create_with_errors_returns_full_report(self) -> None:
        payload = hospital_payload(specialty='NOPE')
        del payload['name']
        resp = self.client1.post('/api/hospitals/new', payload, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error']['code'], 'validation_failed')
        fields = {e['field']: e['code'] for e in resp.data['errors']}
        self.assertEqual(fields, {'name': 'required', 'specialty': 'unknown_code'})
        self.assertFalse(Perceptor.objects.exists())

    def test_create_validation_endpoint(self) -> None:
        resp = self.client1.post('/api/hospitals/new/validation', hospital_payload(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, {'ok': True, 'errors': []})

        payload = hospital_payload(specialty='NOPE')
        del payload['name']
        resp = self.client1.post('/api/hospitals/new/validation', payload, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        # structural errors stop the check before catalog lookups
        self.assertEqual([e['field'] for e in resp.data['errors']], ['name'])
        self.assertFalse(Perceptor.objects.exists())

    def test_edit_form_and_update(self) -> None:
        created = self._create()
        resp = self.client1.get('/api/hospitals/H/1001/edit')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['action'], 'update')
        self.assertEqual(resp.data['data']['name'], 'St. Mary')

        payload = hospital_payload(name='St. Mary Central', version=created['version'])
        resp = self.client1.post('/api/hospitals/H/1001/edit', payload, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['message'], 'Hospital H/1001 updated.')
        self.assertEqual((resp.data['data']['name'], resp.data['data']['version']), ('St. Mary Central', 2))

    def test_update_with_stale_version(self) -> None:
        self._create()
        self.client1.post('/api/hospitals/H/1001/seize')
        resp = self.client1.post('/api/hospitals/H/1001/edit', hospital_payload(version=1), format='json')
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data['error']['code'], 'stale_version')

    def test_update_validation_endpoint(self) -> None:
        self._create()
        resp = self.client1.post(
            '/api/hospitals/H/1001/edit/validation', hospital_payload(priority='12'), format='json'
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['errors'][0]['field'], 'priority')
        self.assertEqual(Perceptor.objects.get().version, 1)

    def test_status_transitions(self) -> None:
        self._create()
        resp = self.client1.post('/api/hospitals/H/1001/deactivate')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['status'], 'INACTIVE')
        self.assertEqual(resp.data['message'], 'Hospital H/1001 deactivated.')
        # deactivating again succeeds and changes nothing
        resp = self.client1.post('/api/hospitals/H/1001/deactivate')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual((resp.data['data']['status'], resp.data['data']['version']), ('INACTIVE', 2))

        resp = self.client1.post('/api/hospitals/H/1001/seize')
        self.assertEqual(resp.data['data']['status'], 'SEIZED')
        resp = self.client1.post('/api/hospitals/H/1001/reactivate')
        self.assertEqual(resp.data['data']['status'], 'ACTIVE')
        self.assertEqual(resp.data['message'], 'Hospital H/1001 reactivated.')

    def test_invalid_transition(self) -> None:
        self._create()
        resp = self.client1.post('/api/hospitals/H/1001/reactivate')
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data['error']['code'], 'invalid_transition')

    def test_mutations_reject_get(self) -> None:
        self._create()
        resp = self.client1.get('/api/hospitals/H/1001/deactivate')
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(Perceptor.objects.get().status, 'ACTIVE')

    def test_not_found_on_every_operation(self) -> None:
        for method, url in [
            ('get', '/api/hospitals/H/999/edit'),
            ('post', '/api/hospitals/H/999/edit'),
            ('post', '/api/hospitals/H/999/edit/validation'),
            ('post', '/api/hospitals/H/999/deactivate'),
            ('post', '/api/hospitals/H/999/seize'),
            ('post', '/api/hospitals/H/999/reactivate'),
            ('get', '/api/hospitals/H/999/history'),
        ]:
            resp = self._call(self.client1, method, url)
            self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND, url)
            self.assertEqual(resp.data['error']['code'], 'perceptor_not_found')

    def test_other_category_is_not_found(self) -> None:
        self._create()
        resp = self.admin_client.post('/api/hospitals/C/1001/deactivate')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_foreign_manager_is_forbidden(self) -> None:
        self._create()
        for method, url in [
            ('get', '/api/hospitals/H/1001/edit'),
            ('post', '/api/hospitals/H/1001/edit'),
            ('post', '/api/hospitals/H/1001/edit/validation'),
            ('post', '/api/hospitals/H/1001/deactivate'),
            ('post', '/api/hospitals/H/1001/seize'),
            ('post', '/api/hospitals/H/1001/reactivate'),
            ('get', '/api/hospitals/H/1001/history'),
        ]:
            resp = self._call(self.client2, method, url)
            self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN, url)
            self.assertEqual(resp.data['error']['code'], 'perceptor_forbidden')
        perceptor = Perceptor.objects.get()
        self.assertEqual((perceptor.status, perceptor.version), ('ACTIVE', 1))

    def test_admin_reaches_every_hospital(self) -> None:
        self._create()
        resp = self.admin_client.post('/api/hospitals/H/1001/seize')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_search(self) -> None:
        self._create()
        self._create(name='Levante', client=self.client2)
        Perceptor.objects.create(category='C', code=1001, name='St. Mary clinic', priority='1', specialty='CARD')

        resp = self.client1.post('/api/hospitals/search', {'category': 'C', 'name': 'mary'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in resp.data['data']], ['H/1001'])
        self.assertEqual(resp.data['criteria']['category'], 'H')

        resp = self.client1.post('/api/hospitals/search', {}, format='json')
        self.assertEqual(resp.data['total'], 2)

    def test_search_validation(self) -> None:
        resp = self.client1.post('/api/hospitals/search/validation', {'codeFrom': 5, 'codeTo': 1}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['errors'][0]['code'], 'invalid_range')

        resp = self.client1.post('/api/hospitals/search', {'codeFrom': 5, 'codeTo': 1}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['errors'][0]['field'], 'codeTo')

    def test_history(self) -> None:
        self._create()
        self.client1.post('/api/hospitals/H/1001/deactivate')
        resp = self.client1.get('/api/hospitals/H/1001/history')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([h['action'] for h in resp.data['data']], ['create', 'deactivate'])
        self.assertEqual(PerceptorTransition.objects.count(), 2)

    def test_database_failure_returns_503(self) -> None:
        self._create()
        with mock.patch.object(Perceptor.objects, 'select_for_update', side_effect=DatabaseError('gone')):
            resp = self.client1.post('/api/hospitals/H/1001/seize')
        self.assertEqual(resp.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertFalse(resp.data['ok'])
        self.assertEqual(resp.data['error']['code'], 'collaborator_unavailable')
        self.assertEqual(Perceptor.objects.get().status, 'ACTIVE')

    def test_unwrapped_database_error_returns_503(self) -> None:
        with mock.patch('perceptors.views.hospitals.HospitalService.list_form', side_effect=DatabaseError('gone')):
            resp = self.client1.get('/api/hospitals')
        self.assertEqual(resp.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(resp.data['error']['code'], 'collaborator_unavailable')
