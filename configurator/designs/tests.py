"""
Test suite for saved user designs
Tests: public save and lookup by email, admin-only listing and delete,
customer-side updates
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from configurator.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from configurator.designs.models import UserDesign


class UserDesignAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.shower_type = TestDataFactory.create_shower_type()
        self.admin_client = AuthenticatedAPIClient()
        self.admin_client.authenticate_user(TestDataFactory.create_admin())

    def _payload(self, **overrides):
        data = {
            'user_full_name': 'Jane Customer',
            'user_email': 'Jane@Example.com',
            'user_phone': '(555) 123-4567',
            'user_postal_code': 'M5V 2T6',
            'design_data': {'layers': [{'category_id': 1, 'variant_id': 2}]},
            'shower_type_id': self.shower_type.id,
        }
        data.update(overrides)
        return data

    def test_save_design_publicly(self):
        response = self.client.post('/api/user-designs/', self._payload())
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(
            response.data['message'],
            'Design saved successfully! You can load it anytime using your email address.'
        )
        self.assertEqual(response.data['data']['user_email'], 'jane@example.com')
        self.assertEqual(response.data['data']['shower_type']['id'], self.shower_type.id)

    def test_save_requires_existing_shower_type(self):
        response = self.client.post('/api/user-designs/', self._payload(shower_type_id=9999))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Shower type not found')

    def test_save_validates_contact_details(self):
        response = self.client.post('/api/user-designs/', self._payload(
            user_phone='123', user_postal_code='1', user_email='not-an-email'
        ))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(set(response.data['errors']), {'user_phone', 'user_postal_code', 'user_email'})

    def test_design_data_must_be_an_object(self):
        response = self.client.post('/api/user-designs/', self._payload(design_data=['layer']))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors']['design_data'], ['Design data must be a JSON object'])

    def test_lookup_by_email_is_public_and_case_insensitive(self):
        TestDataFactory.create_user_design(shower_type=self.shower_type, email='jane@example.com')
        TestDataFactory.create_user_design(shower_type=self.shower_type, email='other@example.com')
        response = self.client.get('/api/user-designs/', {'email': 'JANE@example.com'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertEqual(response.data['data'][0]['user_email'], 'jane@example.com')

    def test_listing_without_email_needs_admin(self):
        response = self.client.get('/api/user-designs/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Email parameter required or admin authentication needed')

    def test_admin_listing_is_newest_first_and_searchable(self):
        first = TestDataFactory.create_user_design(shower_type=self.shower_type, email='first@example.com')
        second = TestDataFactory.create_user_design(shower_type=self.shower_type, email='second@example.com')
        response = self.admin_client.get('/api/user-designs/')
        self.assertEqual([row['id'] for row in response.data['data']], [second.id, first.id])

        response = self.admin_client.get('/api/user-designs/', {'search': 'first@'})
        self.assertEqual([row['id'] for row in response.data['data']], [first.id])

    def test_search_is_ignored_for_public_lookup(self):
        TestDataFactory.create_user_design(shower_type=self.shower_type, email='jane@example.com')
        response = self.client.get('/api/user-designs/', {'email': 'jane@example.com', 'search': 'nobody'})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_filter_by_shower_type(self):
        TestDataFactory.create_user_design(shower_type=self.shower_type)
        TestDataFactory.create_user_design()
        response = self.admin_client.get('/api/user-designs/', {'shower_type_id': self.shower_type.id})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_retrieve(self):
        design = TestDataFactory.create_user_design(shower_type=self.shower_type)
        response = self.client.get(f'/api/user-designs/{design.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['design_data'], {'layers': []})

        response = self.client.get('/api/user-designs/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Design not found')

    def test_customer_update_keeps_email_and_shower_type(self):
        design = TestDataFactory.create_user_design(shower_type=self.shower_type, email='jane@example.com')
        other = TestDataFactory.create_shower_type()
        response = self.client.patch(f'/api/user-designs/{design.id}/', {
            'design_data': {'layers': [{'variant_id': 7}]},
            'user_email': 'someone@else.com',
            'shower_type_id': other.id,
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        design.refresh_from_db()
        self.assertEqual(design.design_data, {'layers': [{'variant_id': 7}]})
        self.assertEqual(design.user_email, 'jane@example.com')
        self.assertEqual(design.shower_type_id, self.shower_type.id)

    def test_put_is_not_allowed(self):
        design = TestDataFactory.create_user_design(shower_type=self.shower_type)
        response = self.client.put(f'/api/user-designs/{design.id}/', self._payload())
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_delete_needs_admin(self):
        design = TestDataFactory.create_user_design(shower_type=self.shower_type)
        response = self.client.delete(f'/api/user-designs/{design.id}/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        response = self.admin_client.delete(f'/api/user-designs/{design.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(UserDesign.objects.exists())
