"""
Test suite for the catalog module
Tests: CRUD for project types down to color variants, slug scoping, delete
guards, z_index rules, the shopper category listing, image uploads and the
Cloudinary helpers
"""
from io import BytesIO
from unittest.mock import patch

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from PIL import Image
from rest_framework import status
from rest_framework.test import APIClient

from configurator.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from configurator.catalog.cloudinary_service import (
    delete_image_by_url, extract_public_id, get_plumbing_adjusted_image, get_thumbnail_url, sign_params
)
from configurator.catalog.models import ProjectType, Category, Subcategory, Product, ProductVariant

CLOUDINARY_SETTINGS = {
    'CLOUDINARY_CLOUD_NAME': 'demo',
    'CLOUDINARY_API_KEY': 'key',
    'CLOUDINARY_API_SECRET': 'secret',
    'CLOUDINARY_UPLOAD_ROOT': 'bath-fitter',
}

IMAGE_URL = 'https://res.cloudinary.com/demo/image/upload/v1712/bath-fitter/walls/genova.png'


def make_png(name='panel.png'):
    buffer = BytesIO()
    Image.new('RGB', (4, 4), '#FFFFFF').save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class CatalogAPITestCase(TestCase):
    """Admin client plus a clean cache for every test"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)


class ProjectTypeAPITests(CatalogAPITestCase):

    def test_create_project_type(self):
        response = self.client.post('/api/project-types/', {'name': 'Bath Remodel', 'slug': 'bath-remodel'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['slug'], 'bath-remodel')
        self.assertEqual(response.data['message'], 'Project type created successfully')

    def test_duplicate_slug_is_conflict(self):
        TestDataFactory.create_project_type(slug='bath-remodel')
        response = self.client.post('/api/project-types/', {'name': 'Other', 'slug': 'bath-remodel'})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'Project type with this slug already exists')

    def test_invalid_slug(self):
        response = self.client.post('/api/project-types/', {'name': 'Bath', 'slug': 'Bath Remodel'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('slug', response.data['errors'])

    def test_list_is_public_and_paginated(self):
        for _ in range(3):
            TestDataFactory.create_project_type()
        response = APIClient().get('/api/project-types/', {'page': 2, 'limit': 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['pagination']['total'], 3)
        self.assertEqual(response.data['pagination']['total_pages'], 2)
        self.assertFalse(response.data['pagination']['has_next_page'])

    def test_detail_includes_shower_types(self):
        shower_type = TestDataFactory.create_shower_type()
        response = self.client.get(f'/api/project-types/{shower_type.project_type_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['shower_types'][0]['id'], shower_type.id)

    def test_patch_updates_only_given_fields(self):
        project_type = TestDataFactory.create_project_type(name='Old', slug='old')
        response = self.client.patch(f'/api/project-types/{project_type.id}/', {'name': 'New'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        project_type.refresh_from_db()
        self.assertEqual(project_type.name, 'New')
        self.assertEqual(project_type.slug, 'old')

    def test_delete_with_shower_types_is_refused(self):
        shower_type = TestDataFactory.create_shower_type()
        url = f'/api/project-types/{shower_type.project_type_id}/'
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete project type with 1 associated shower type(s)')

        shower_type.delete()
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ProjectType.objects.exists())

    def test_bad_and_missing_ids(self):
        response = self.client.get('/api/project-types/abc/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid project type ID')

        response = self.client.get('/api/project-types/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Project type not found')


class ShowerTypeAPITests(CatalogAPITestCase):

    def test_create_requires_existing_project_type(self):
        response = self.client.post('/api/shower-types/', {'name': 'Tub', 'slug': 'tub', 'project_type_id': 9999})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Project type not found')

    def test_create_and_filter_by_project_type(self):
        project_type = TestDataFactory.create_project_type()
        TestDataFactory.create_shower_type()
        response = self.client.post('/api/shower-types/', {
            'name': 'Tub to Shower', 'slug': 'tub-to-shower', 'project_type_id': project_type.id,
            'base_image_left': 'https://res.cloudinary.com/demo/image/upload/base-left.png',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['project_type']['id'], project_type.id)

        response = self.client.get('/api/shower-types/', {'project_type_id': project_type.id})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_delete_with_user_designs_is_refused(self):
        design = TestDataFactory.create_user_design()
        response = self.client.delete(f'/api/shower-types/{design.shower_type_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class CategoryAPITests(CatalogAPITestCase):

    def setUp(self):
        super().setUp()
        self.shower_type = TestDataFactory.create_shower_type()

    def _create(self, **overrides):
        data = {'name': 'Walls', 'slug': 'walls', 'shower_type_id': self.shower_type.id}
        data.update(overrides)
        return self.client.post('/api/categories/', data)

    def test_create_defaults_z_index(self):
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['z_index'], 50)
        self.assertEqual(response.data['data']['plumbing_config'], 'LEFT')

    def test_explicit_zero_z_index_is_kept(self):
        response = self._create(z_index=0)
        self.assertEqual(response.data['data']['z_index'], 0)

    def test_z_index_out_of_range(self):
        response = self._create(z_index=150)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors']['z_index'], ['z_index must be between 0 and 100'])

    def test_slug_is_unique_per_shower_type(self):
        self.assertEqual(self._create().status_code, status.HTTP_201_CREATED)

        response = self._create(name='Walls again')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'Category with this slug already exists in this shower type')

        other = TestDataFactory.create_shower_type()
        self.assertEqual(self._create(shower_type_id=other.id).status_code, status.HTTP_201_CREATED)

    def test_moving_into_shower_type_with_same_slug_is_conflict(self):
        other = TestDataFactory.create_shower_type()
        TestDataFactory.create_category(slug='walls', shower_type=other)
        category = TestDataFactory.create_category(slug='walls', shower_type=self.shower_type)
        response = self.client.patch(f'/api/categories/{category.id}/', {'shower_type_id': other.id})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_unknown_template(self):
        response = self._create(template_id=9999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Template not found')

    def test_put_replaces_category(self):
        category = TestDataFactory.create_category(shower_type=self.shower_type, slug='walls')
        response = self.client.put(f'/api/categories/{category.id}/', {
            'name': 'Accessories', 'slug': 'accessories', 'shower_type_id': self.shower_type.id,
            'z_index': 80, 'plumbing_config': 'RIGHT',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        category.refresh_from_db()
        self.assertEqual((category.slug, category.z_index, category.plumbing_config), ('accessories', 80, 'RIGHT'))

    def test_admin_listing(self):
        TestDataFactory.create_category(shower_type=self.shower_type)
        TestDataFactory.create_category()
        response = self.client.get('/api/categories/', {'for_admin': 'true', 'shower_type_id': self.shower_type.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_shopper_listing_requires_shower_type(self):
        response = APIClient().get('/api/categories/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'shower_type_id is required for customer-facing API')

    def test_shopper_listing_hides_empty_categories(self):
        stocked = TestDataFactory.create_category(shower_type=self.shower_type, name='Walls')
        TestDataFactory.create_category(shower_type=self.shower_type, name='Empty')
        with_variants = TestDataFactory.create_product(category=stocked, name='Genova')
        TestDataFactory.create_variant(product=with_variants)
        TestDataFactory.create_product(category=stocked, name='Bare')

        response = APIClient().get('/api/categories/', {'shower_type_id': self.shower_type.id})
        self.assertEqual([row['id'] for row in response.data['data']], [stocked.id])
        self.assertIsNone(response.data['data'][0]['products'])

        response = APIClient().get('/api/categories/', {
            'shower_type_id': self.shower_type.id, 'include_products': 'true'
        })
        products = response.data['data'][0]['products']
        self.assertEqual([product['name'] for product in products], ['Genova'])

    def test_delete_with_children_is_refused(self):
        category = TestDataFactory.create_category(shower_type=self.shower_type)
        subcategory = TestDataFactory.create_subcategory(category=category)
        response = self.client.delete(f'/api/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        subcategory.delete()
        response = self.client.delete(f'/api/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'id': category.id})

    def test_anonymous_create_is_unauthorized(self):
        response = APIClient().post('/api/categories/', {
            'name': 'Walls', 'slug': 'walls', 'shower_type_id': self.shower_type.id
        })
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(Category.objects.exists())


class SubcategoryAPITests(CatalogAPITestCase):

    def test_inherits_category_z_index_and_flags_category(self):
        category = TestDataFactory.create_category(z_index=30)
        response = self.client.post('/api/subcategories/', {
            'name': 'Panels', 'slug': 'panels', 'category_id': category.id
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['z_index'], 30)
        category.refresh_from_db()
        self.assertTrue(category.has_subcategories)

    def test_slug_is_unique_per_category(self):
        subcategory = TestDataFactory.create_subcategory(slug='panels')
        response = self.client.post('/api/subcategories/', {
            'name': 'Panels', 'slug': 'panels', 'category_id': subcategory.category_id
        })
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        other = TestDataFactory.create_category()
        response = self.client.post('/api/subcategories/', {
            'name': 'Panels', 'slug': 'panels', 'category_id': other.id
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_list_filtered_by_category(self):
        subcategory = TestDataFactory.create_subcategory()
        TestDataFactory.create_subcategory()
        response = self.client.get('/api/subcategories/', {'category_id': subcategory.category_id})
        self.assertEqual(response.data['pagination']['total'], 1)

        response = self.client.get('/api/subcategories/', {'category_id': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_with_products_is_refused(self):
        subcategory = TestDataFactory.create_subcategory()
        TestDataFactory.create_product(subcategory=subcategory)
        response = self.client.delete(f'/api/subcategories/{subcategory.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Subcategory.objects.filter(pk=subcategory.pk).exists())


class ProductAPITests(CatalogAPITestCase):

    def setUp(self):
        super().setUp()
        self.category = TestDataFactory.create_category(z_index=20)
        self.subcategory = TestDataFactory.create_subcategory(category=self.category, z_index=60)

    def _create(self, **overrides):
        data = {'name': 'Genova', 'slug': 'genova', 'category_id': self.category.id}
        data.update(overrides)
        return self.client.post('/api/products/', data)

    def test_z_index_inheritance(self):
        response = self._create(subcategory_id=self.subcategory.id)
        self.assertEqual(response.data['data']['z_index'], 60)

        response = self._create(slug='direct')
        self.assertEqual(response.data['data']['z_index'], 20)

        response = self._create(slug='explicit', z_index=5)
        self.assertEqual(response.data['data']['z_index'], 5)

    def test_slug_scope(self):
        self.assertEqual(self._create(subcategory_id=self.subcategory.id).status_code, status.HTTP_201_CREATED)
        response = self._create(subcategory_id=self.subcategory.id)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'Product with this slug already exists')

        # Same slug directly under the category is a different scope
        self.assertEqual(self._create().status_code, status.HTTP_201_CREATED)
        self.assertEqual(self._create().status_code, status.HTTP_409_CONFLICT)

    def test_subcategory_must_belong_to_category(self):
        stranger = TestDataFactory.create_subcategory()
        response = self._create(subcategory_id=stranger.id)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Subcategory in this category not found')

    def test_search_reports_count(self):
        TestDataFactory.create_product(category=self.category, name='Genova Wall Panel')
        TestDataFactory.create_product(category=self.category, name='Corner Shelf')
        response = self.client.get('/api/products/', {'search': 'genova'})
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertEqual(response.data['message'], 'Found 1 product(s)')

    def test_list_is_ordered_by_layer(self):
        TestDataFactory.create_product(category=self.category, name='Top', z_index=90)
        TestDataFactory.create_product(category=self.category, name='Bottom', z_index=10)
        response = self.client.get('/api/products/', {'category_id': self.category.id})
        self.assertEqual([row['name'] for row in response.data['data']], ['Bottom', 'Top'])

    def test_detail_includes_variants(self):
        product = TestDataFactory.create_product(category=self.category)
        TestDataFactory.create_variant(product=product, color_name='White')
        TestDataFactory.create_variant(product=product, color_name='Cream')
        response = self.client.get(f'/api/products/{product.id}/')
        self.assertEqual([row['color_name'] for row in response.data['data']['variants']], ['Cream', 'White'])
        self.assertEqual(response.data['data']['variants_count'], 2)

    def test_delete_with_variants_is_refused(self):
        product = TestDataFactory.create_product(category=self.category)
        variant = TestDataFactory.create_variant(product=product)
        response = self.client.delete(f'/api/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        variant.delete()
        response = self.client.delete(f'/api/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())


class VariantAPITests(CatalogAPITestCase):

    def setUp(self):
        super().setUp()
        self.product = TestDataFactory.create_product()

    def test_list_requires_product_id(self):
        response = self.client.get('/api/variants/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'product_id is required')

    def test_create_normalizes_color_code(self):
        response = self.client.post('/api/variants/', {
            'color_name': 'Cream', 'color_code': '#f5f5dc', 'image_url': IMAGE_URL, 'product_id': self.product.id
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['color_code'], '#F5F5DC')
        self.assertIn('/upload/w_200,h_200,c_fill,q_auto,f_auto/', response.data['data']['preview_url'])

    def test_color_name_is_unique_per_product(self):
        TestDataFactory.create_variant(product=self.product, color_name='Cream')
        response = self.client.post('/api/variants/', {
            'color_name': 'Cream', 'image_url': IMAGE_URL, 'product_id': self.product.id
        })
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_bad_color_code(self):
        response = self.client.post('/api/variants/', {
            'color_name': 'Cream', 'color_code': 'cream', 'image_url': IMAGE_URL, 'product_id': self.product.id
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('color_code', response.data['errors'])

    @patch('configurator.catalog.views.delete_image_by_url')
    def test_replacing_image_removes_old_one(self, mock_delete):
        variant = TestDataFactory.create_variant(product=self.product, image_url=IMAGE_URL)
        new_url = 'https://res.cloudinary.com/demo/image/upload/v2/bath-fitter/walls/genova-2.png'
        response = self.client.patch(f'/api/variants/{variant.id}/', {'image_url': new_url})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_delete.assert_called_once_with(IMAGE_URL, None)

    @override_settings(**CLOUDINARY_SETTINGS)
    @patch('configurator.catalog.cloudinary_service.requests.post')
    def test_delete_destroys_stored_image(self, mock_post):
        mock_post.return_value.status_code = 200
        mock_post.return_value.json.return_value = {'result': 'ok'}
        variant = TestDataFactory.create_variant(product=self.product, image_url=IMAGE_URL)

        response = self.client.delete(f'/api/variants/{variant.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ProductVariant.objects.exists())
        url = mock_post.call_args[0][0]
        self.assertEqual(url, 'https://api.cloudinary.com/v1_1/demo/image/destroy')
        self.assertEqual(mock_post.call_args[1]['data']['public_id'], 'bath-fitter/walls/genova')

    @override_settings(**CLOUDINARY_SETTINGS)
    @patch('configurator.catalog.cloudinary_service.requests.post')
    def test_delete_survives_storage_failure(self, mock_post):
        mock_post.return_value.status_code = 500
        mock_post.return_value.json.return_value = {'error': {'message': 'boom'}}
        variant = TestDataFactory.create_variant(product=self.product, image_url=IMAGE_URL)

        response = self.client.delete(f'/api/variants/{variant.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ProductVariant.objects.exists())


@override_settings(**CLOUDINARY_SETTINGS)
class ImageUploadTests(CatalogAPITestCase):

    @patch('configurator.catalog.cloudinary_service.requests.post')
    def test_upload(self, mock_post):
        mock_post.return_value.status_code = 200
        mock_post.return_value.json.return_value = {
            'secure_url': IMAGE_URL, 'public_id': 'bath-fitter/walls/genova'
        }
        response = self.client.post(
            '/api/upload/', {'file': make_png(), 'folder': 'walls'}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'image_url': IMAGE_URL, 'public_id': 'bath-fitter/walls/genova'})
        self.assertEqual(mock_post.call_args[0][0], 'https://api.cloudinary.com/v1_1/demo/image/upload')
        payload = mock_post.call_args[1]['data']
        self.assertEqual(payload['folder'], 'bath-fitter/walls')
        self.assertEqual(payload['api_key'], 'key')
        self.assertIn('signature', payload)

    def test_upload_requires_file(self):
        response = self.client.post('/api/upload/', {'folder': 'walls'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'No file provided')

    def test_upload_requires_folder(self):
        response = self.client.post('/api/upload/', {'file': make_png()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Folder path is required')

    def test_upload_rejects_non_images(self):
        fake = SimpleUploadedFile('notes.png', b'definitely not a png', content_type='image/png')
        response = self.client.post('/api/upload/', {'file': fake, 'folder': 'walls'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Uploaded file is not a valid image')

    @patch('configurator.catalog.cloudinary_service.requests.post')
    def test_storage_failure_is_bad_gateway(self, mock_post):
        mock_post.return_value.status_code = 401
        mock_post.return_value.json.return_value = {'error': {'message': 'Invalid Signature'}}
        response = self.client.post(
            '/api/upload/', {'file': make_png(), 'folder': 'walls'}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['message'], 'Image upload failed: Invalid Signature')

    def test_upload_requires_admin(self):
        response = APIClient().post('/api/upload/', {'file': make_png(), 'folder': 'walls'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_delete_rejects_foreign_urls(self):
        response = self.client.delete('/api/upload/', {'image_url': 'https://example.com/picture'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid image URL')


class CloudinaryHelperTests(TestCase):

    def test_extract_public_id(self):
        self.assertEqual(extract_public_id(IMAGE_URL), 'bath-fitter/walls/genova')
        self.assertEqual(
            extract_public_id('https://res.cloudinary.com/demo/image/upload/walls/panel.JPG'), 'walls/panel'
        )
        self.assertIsNone(extract_public_id('https://example.com/panel.gif'))
        self.assertIsNone(extract_public_id(None))

    def test_sign_params_skips_empty_values(self):
        self.assertEqual(
            sign_params({'timestamp': 1, 'folder': 'walls', 'eager': ''}, 'secret'),
            sign_params({'folder': 'walls', 'timestamp': 1}, 'secret'),
        )

    def test_mirroring(self):
        mirrored = get_plumbing_adjusted_image(IMAGE_URL, 'LEFT', 'RIGHT')
        self.assertEqual(
            mirrored, 'https://res.cloudinary.com/demo/image/upload/a_hflip/v1712/bath-fitter/walls/genova.png'
        )
        self.assertEqual(get_plumbing_adjusted_image(IMAGE_URL, 'LEFT', 'LEFT'), IMAGE_URL)
        self.assertEqual(get_plumbing_adjusted_image(IMAGE_URL, 'BOTH', 'RIGHT'), IMAGE_URL)
        self.assertEqual(get_plumbing_adjusted_image(IMAGE_URL, None, 'RIGHT'), mirrored)

    def test_non_cloudinary_urls_are_left_alone(self):
        url = 'https://example.com/upload/panel.png'
        self.assertEqual(get_plumbing_adjusted_image(url, 'LEFT', 'RIGHT'), url)
        self.assertEqual(get_thumbnail_url(url), url)

    @override_settings(CLOUDINARY_CLOUD_NAME='', CLOUDINARY_API_KEY='', CLOUDINARY_API_SECRET='')
    def test_best_effort_delete_without_configuration(self):
        self.assertFalse(delete_image_by_url(IMAGE_URL))
