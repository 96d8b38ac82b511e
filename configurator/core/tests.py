"""
Test suite for the shared API plumbing
Tests: envelope and pagination helpers, validators, admin login, cookie auth,
exception handling, cache invalidation and the create_admin command
"""
from io import StringIO

from django.conf import settings
from django.core.cache import cache
from django.core.management import call_command
from django.db import IntegrityError
from django.http import QueryDict
from django.test import TestCase, override_settings
from rest_framework import serializers, status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from configurator.core.cache_utils import PROJECT_TYPES_LIST, get_generation, make_cache_key
from configurator.core.cache_signals import suspend_cache_signals
from configurator.core.exceptions import BadRequestError, ConflictError, NotFoundError, api_exception_handler
from configurator.core.models import User
from configurator.core.responses import build_pagination, parse_pagination_params
from configurator.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from configurator.core.validators import (
    normalize_color_code, parse_id_param, resolve_z_index, sanitize_search,
    validate_phone, validate_slug, validate_z_index
)


class PaginationTests(TestCase):
    """Test page/limit parsing and the pagination block"""

    def test_defaults(self):
        self.assertEqual(parse_pagination_params(QueryDict('')), (1, 10, 0))

    def test_skip_is_offset_of_page(self):
        self.assertEqual(parse_pagination_params(QueryDict('page=3&limit=20')), (3, 20, 40))

    def test_page_and_limit_are_clamped(self):
        self.assertEqual(parse_pagination_params(QueryDict('page=0&limit=0')), (1, 1, 0))
        self.assertEqual(parse_pagination_params(QueryDict('page=-4&limit=500')), (1, 100, 0))

    def test_garbage_falls_back_to_defaults(self):
        self.assertEqual(parse_pagination_params(QueryDict('page=abc&limit=xyz'), default_limit=50), (1, 50, 0))

    def test_build_pagination(self):
        pagination = build_pagination(page=2, limit=10, total=25)
        self.assertEqual(pagination['total_pages'], 3)
        self.assertTrue(pagination['has_next_page'])
        self.assertTrue(pagination['has_previous_page'])

    def test_build_pagination_empty(self):
        pagination = build_pagination(page=1, limit=10, total=0)
        self.assertEqual(pagination['total_pages'], 0)
        self.assertFalse(pagination['has_next_page'])
        self.assertFalse(pagination['has_previous_page'])


class ValidatorTests(TestCase):

    def test_parse_id_param(self):
        self.assertEqual(parse_id_param('12', 'category'), 12)
        for bad in ('abc', '0', '-3', '12abc', '012', '', None):
            with self.assertRaises(BadRequestError) as ctx:
                parse_id_param(bad, 'category')
            self.assertEqual(ctx.exception.message, 'Invalid category ID')

    def test_slug(self):
        self.assertEqual(validate_slug('wall-panels-2'), 'wall-panels-2')
        for bad in ('Wall', 'wall--panels', '-wall', 'wall_panels', ''):
            with self.assertRaises(serializers.ValidationError):
                validate_slug(bad)

    def test_color_code_is_normalized(self):
        self.assertEqual(normalize_color_code('#f5f5dc'), '#F5F5DC')
        self.assertEqual(normalize_color_code('#abc'), '#ABC')
        self.assertIsNone(normalize_color_code(''))
        with self.assertRaises(serializers.ValidationError):
            normalize_color_code('white')

    def test_z_index_range(self):
        self.assertEqual(validate_z_index(0), 0)
        self.assertEqual(validate_z_index(100), 100)
        with self.assertRaises(serializers.ValidationError):
            validate_z_index(101)
        with self.assertRaises(serializers.ValidationError):
            validate_z_index(-1)

    def test_z_index_inheritance(self):
        category = TestDataFactory.create_category(z_index=30)
        subcategory = TestDataFactory.create_subcategory(category=category, z_index=70)
        self.assertEqual(resolve_z_index(5, subcategory, category), 5)
        self.assertEqual(resolve_z_index(0, subcategory, category), 0)
        self.assertEqual(resolve_z_index(None, subcategory, category), 70)
        self.assertEqual(resolve_z_index(None, None, category), 30)
        self.assertEqual(resolve_z_index(), 50)

    def test_phone(self):
        self.assertEqual(validate_phone(' 555-123-4567 '), '555-123-4567')
        with self.assertRaises(serializers.ValidationError):
            validate_phone('12345')
        with self.assertRaises(serializers.ValidationError):
            validate_phone('555-CALL-NOW-1')

    def test_sanitize_search(self):
        self.assertEqual(sanitize_search('  <b>marble</b> '), 'bmarble/b')
        self.assertEqual(sanitize_search(None), '')


class LoginTests(TestCase):
    """Test credential login, refresh and logout"""

    def setUp(self):
        self.client = APIClient()
        self.admin = TestDataFactory.create_admin(
            username='admin', email='admin@bathfitter.com', password='Admin@123', full_name='Super Admin'
        )

    def test_login_with_email_is_case_insensitive(self):
        response = self.client.post('/api/auth/login/', {'identifier': 'Admin@BathFitter.com', 'password': 'Admin@123'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['user']['email'], 'admin@bathfitter.com')
        self.assertIn('access', response.data['data'])
        self.assertIn(settings.AUTH_COOKIE_NAME, response.cookies)
        self.assertTrue(response.cookies[settings.AUTH_COOKIE_NAME]['httponly'])

    def test_login_with_username(self):
        response = self.client.post('/api/auth/login/', {'identifier': 'admin', 'password': 'Admin@123'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.admin.refresh_from_db()
        self.assertIsNotNone(self.admin.last_login)

    def test_login_missing_fields(self):
        response = self.client.post('/api/auth/login/', {'identifier': 'admin'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Email/username and password are required')

    def test_login_wrong_password(self):
        response = self.client.post('/api/auth/login/', {'identifier': 'admin', 'password': 'nope'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'Invalid email/username or password')

    def test_login_inactive_admin(self):
        self.admin.is_active = False
        self.admin.save()
        response = self.client.post('/api/auth/login/', {'identifier': 'admin', 'password': 'Admin@123'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        refresh = RefreshToken.for_user(self.admin)
        response = self.client.post('/api/auth/refresh/', {'refresh': str(refresh)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data['data'])

    def test_refresh_with_garbage_token(self):
        response = self.client.post('/api/auth/refresh/', {'refresh': 'not-a-token'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_logout_clears_cookie(self):
        response = self.client.post('/api/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies[settings.AUTH_COOKIE_NAME].value, '')


class AuthenticationTests(TestCase):
    """Test header and cookie JWT authentication and permission envelopes"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()

    def test_me_with_bearer_token(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['username'], self.admin.username)

    def test_me_with_session_cookie(self):
        self.client.cookies[settings.AUTH_COOKIE_NAME] = str(RefreshToken.for_user(self.admin).access_token)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_me_anonymous(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {
            'success': False,
            'message': 'Unauthorized. Please sign in to access this resource.'
        })

    def test_invalid_cookie_keeps_public_reads_working(self):
        self.client.cookies[settings.AUTH_COOKIE_NAME] = 'tampered'
        response = self.client.get('/api/project-types/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_cookie_of_deleted_admin_keeps_public_reads_working(self):
        token = str(RefreshToken.for_user(self.admin).access_token)
        self.admin.delete()
        self.client.cookies[settings.AUTH_COOKIE_NAME] = token
        response = self.client.get('/api/project-types/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post('/api/project-types/', {'name': 'Bath', 'slug': 'bath'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_anonymous_mutation_is_rejected(self):
        response = self.client.post('/api/project-types/', {'name': 'Bath', 'slug': 'bath'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_non_staff_mutation_is_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/project-types/', {'name': 'Bath', 'slug': 'bath'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ExceptionHandlerTests(TestCase):
    """Test the mapping from exceptions to envelope responses"""

    def test_app_errors(self):
        response = api_exception_handler(NotFoundError('Category'), {})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Category not found')

        response = api_exception_handler(ConflictError('Category with this slug already exists'), {})
        self.assertEqual(response.status_code, 409)

    def test_validation_error_lists_fields(self):
        response = api_exception_handler(serializers.ValidationError({'slug': ['This field is required.']}), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Validation failed')
        self.assertEqual(response.data['errors'], {'slug': ['This field is required.']})

    def test_unique_violation_is_conflict(self):
        exc = IntegrityError('UNIQUE constraint failed: categories.shower_type_id, categories.slug')
        response = api_exception_handler(exc, {})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['message'], 'A record with this slug already exists')

    def test_foreign_key_violation_is_bad_request(self):
        response = api_exception_handler(IntegrityError('FOREIGN KEY constraint failed'), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Related record not found')

    @override_settings(DEBUG=False)
    def test_unexpected_error_is_hidden(self):
        with self.assertLogs('configurator.core.exceptions', level='ERROR'):
            response = api_exception_handler(RuntimeError('database on fire'), {})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['message'], 'An unexpected error occurred')


class CacheInvalidationTests(TestCase):
    """Test that catalog writes bump the public list generation"""

    def setUp(self):
        cache.clear()

    def test_save_bumps_generation(self):
        before = get_generation(PROJECT_TYPES_LIST)
        TestDataFactory.create_project_type()
        self.assertEqual(get_generation(PROJECT_TYPES_LIST), before + 1)

    def test_suspended_signals_do_not_bump(self):
        before = get_generation(PROJECT_TYPES_LIST)
        with suspend_cache_signals():
            TestDataFactory.create_project_type()
        self.assertEqual(get_generation(PROJECT_TYPES_LIST), before)

    def test_cached_list_is_refreshed_after_create(self):
        client = APIClient()
        first = client.get('/api/project-types/')
        self.assertEqual(first.data['pagination']['total'], 0)
        self.assertIn('s-maxage=3600', first['Cache-Control'])

        TestDataFactory.create_project_type()
        second = client.get('/api/project-types/')
        self.assertEqual(second.data['pagination']['total'], 1)

    def test_query_params_named_like_key_arguments(self):
        TestDataFactory.create_project_type()
        client = APIClient()
        for url in ('/api/project-types/', '/api/shower-types/'):
            response = client.get(url, {'prefix': 'x', 'params': 'y'})
            self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_cache_key_depends_on_params(self):
        first = make_cache_key(PROJECT_TYPES_LIST, {'page': '1', 'prefix': 'x'})
        same = make_cache_key(PROJECT_TYPES_LIST, {'prefix': 'x', 'page': '1'})
        other = make_cache_key(PROJECT_TYPES_LIST, {'page': '2'})
        self.assertEqual(first, same)
        self.assertNotEqual(first, other)


class CreateAdminCommandTests(TestCase):

    def test_creates_then_updates_admin(self):
        out = StringIO()
        call_command('create_admin', stdout=out)
        admin = User.objects.get(email='admin@bathfitter.com')
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.check_password('Admin@123'))
        self.assertEqual(admin.full_name, 'Super Admin')

        call_command('create_admin', '--password', 'Changed@456', stdout=out)
        admin.refresh_from_db()
        self.assertTrue(admin.check_password('Changed@456'))
        self.assertEqual(User.objects.count(), 1)
        self.assertIn('Updated admin', out.getvalue())
