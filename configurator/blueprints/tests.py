"""
Test suite for the template module
Tests: template CRUD, slug scoping, delete guards, instantiation onto shower
types and the seed_templates command
"""
from io import StringIO
from unittest.mock import patch

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from configurator.core.cache_utils import SHOWER_TYPES_LIST, get_generation
from configurator.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from configurator.blueprints.instantiation import build_instance, instantiate_template, load_template_tree
from configurator.blueprints.models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant
from configurator.catalog.models import Category, Subcategory, Product, ProductVariant

LEFT_IMAGE = 'https://res.cloudinary.com/demo/image/upload/v1/bath-fitter/templates/genova-white.png'


class TemplateAPITestCase(TestCase):

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)


class TemplateCategoryAPITests(TemplateAPITestCase):

    def test_create_and_duplicate(self):
        data = {'name': 'Shower Walls', 'slug': 'shower-walls', 'description': 'Wall template'}
        response = self.client.post('/api/template-categories/', data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['data']['is_active'])

        response = self.client.post('/api/template-categories/', data)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'Template with this slug already exists')

    def test_list_filters_by_active_flag(self):
        TestDataFactory.create_template_category(is_active=True)
        TestDataFactory.create_template_category(is_active=False)
        response = self.client.get('/api/template-categories/', {'is_active': 'false'})
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertFalse(response.data['data'][0]['is_active'])

    def test_detail_separates_direct_products(self):
        template = TestDataFactory.create_template_category()
        subcategory = TestDataFactory.create_template_subcategory(template_category=template)
        TestDataFactory.create_template_product(template_subcategory=subcategory, name='In subcategory')
        TestDataFactory.create_template_product(template_category=template, name='Direct')

        response = self.client.get(f'/api/template-categories/{template.id}/')
        data = response.data['data']
        self.assertEqual(len(data['template_subcategories']), 1)
        self.assertEqual([product['name'] for product in data['template_products']], ['Direct'])
        self.assertEqual(data['instances'], [])

    def test_delete_with_subcategories_is_refused(self):
        subcategory = TestDataFactory.create_template_subcategory()
        template_id = subcategory.template_category_id
        response = self.client.delete(f'/api/template-categories/{template_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        subcategory.delete()
        response = self.client.delete(f'/api/template-categories/{template_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_anonymous_create_is_unauthorized(self):
        response = APIClient().post('/api/template-categories/', {'name': 'Walls', 'slug': 'walls'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class TemplateSubcategoryAPITests(TemplateAPITestCase):

    def test_slug_is_unique_per_template(self):
        existing = TestDataFactory.create_template_subcategory(slug='wall-panels')
        response = self.client.post('/api/template-subcategories/', {
            'name': 'Wall Panels', 'slug': 'wall-panels', 'template_category_id': existing.template_category_id
        })
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        other = TestDataFactory.create_template_category()
        response = self.client.post('/api/template-subcategories/', {
            'name': 'Wall Panels', 'slug': 'wall-panels', 'template_category_id': other.id
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_unknown_template(self):
        response = self.client.post('/api/template-subcategories/', {
            'name': 'Wall Panels', 'slug': 'wall-panels', 'template_category_id': 9999
        })
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Template category not found')


class TemplateProductAPITests(TemplateAPITestCase):

    def test_requires_a_parent(self):
        response = self.client.post('/api/template-products/', {'name': 'Genova', 'slug': 'genova'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data['message'], 'Either template_category_id or template_subcategory_id is required'
        )

    def test_subcategory_implies_template(self):
        subcategory = TestDataFactory.create_template_subcategory()
        response = self.client.post('/api/template-products/', {
            'name': 'Genova', 'slug': 'genova', 'template_subcategory_id': subcategory.id
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['template_category_id'], subcategory.template_category_id)

    def test_subcategory_of_another_template(self):
        subcategory = TestDataFactory.create_template_subcategory()
        other = TestDataFactory.create_template_category()
        response = self.client.post('/api/template-products/', {
            'name': 'Genova', 'slug': 'genova',
            'template_category_id': other.id, 'template_subcategory_id': subcategory.id
        })
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_moving_to_subcategory_of_another_template(self):
        product = TestDataFactory.create_template_product(
            template_subcategory=TestDataFactory.create_template_subcategory()
        )
        target = TestDataFactory.create_template_subcategory()
        response = self.client.patch(
            f'/api/template-products/{product.id}/', {'template_subcategory_id': target.id}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.template_subcategory_id, target.id)
        self.assertEqual(product.template_category_id, target.template_category_id)

    def test_slug_scope(self):
        subcategory = TestDataFactory.create_template_subcategory()
        TestDataFactory.create_template_product(template_subcategory=subcategory, slug='genova')
        response = self.client.post('/api/template-products/', {
            'name': 'Genova', 'slug': 'genova', 'template_subcategory_id': subcategory.id
        })
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        # Directly on the template is a separate scope
        response = self.client.post('/api/template-products/', {
            'name': 'Genova', 'slug': 'genova', 'template_category_id': subcategory.template_category_id
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_list_is_unpaginated(self):
        product = TestDataFactory.create_template_product()
        TestDataFactory.create_template_product()
        response = self.client.get('/api/template-products/', {'template_category_id': product.template_category_id})
        self.assertEqual(len(response.data['data']), 1)
        self.assertNotIn('pagination', response.data)

    def test_delete_with_variants_is_refused(self):
        variant = TestDataFactory.create_template_variant()
        response = self.client.delete(f'/api/template-products/{variant.template_product_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(TemplateProduct.objects.filter(pk=variant.template_product_id).exists())


class TemplateVariantAPITests(TemplateAPITestCase):

    def test_create_and_duplicate_color(self):
        product = TestDataFactory.create_template_product()
        data = {
            'color_name': 'Cream', 'color_code': '#f5f5dc', 'image_url': LEFT_IMAGE,
            'template_product_id': product.id
        }
        response = self.client.post('/api/template-variants/', data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['color_code'], '#F5F5DC')
        self.assertEqual(response.data['data']['plumbing_config'], 'LEFT')

        response = self.client.post('/api/template-variants/', data)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_list_filtered_by_product(self):
        variant = TestDataFactory.create_template_variant()
        TestDataFactory.create_template_variant()
        response = self.client.get('/api/template-variants/', {'template_product_id': variant.template_product_id})
        self.assertEqual(response.data['pagination']['total'], 1)


class TemplateInstantiationTests(TemplateAPITestCase):
    """Test stamping a template onto shower types"""

    def setUp(self):
        super().setUp()
        self.template = TestDataFactory.create_template_category(name='Shower Walls', slug='shower-walls')
        self.subcategory = TestDataFactory.create_template_subcategory(
            name='Wall Panels', slug='wall-panels', template_category=self.template
        )
        self.panel = TestDataFactory.create_template_product(
            name='Genova Wall Panel', slug='genova-wall-panel', template_subcategory=self.subcategory
        )
        TestDataFactory.create_template_variant(
            template_product=self.panel, color_name='White Marble', image_url=LEFT_IMAGE
        )
        TestDataFactory.create_template_variant(
            template_product=self.panel, color_name='Cream', color_code='#F5F5DC', image_url=LEFT_IMAGE
        )
        self.shelf = TestDataFactory.create_template_product(
            name='Corner Shelf', slug='corner-shelf', template_category=self.template
        )
        self.shower_type = TestDataFactory.create_shower_type(name='Alcove')

    def _instantiate(self, shower_type_ids=None, **options):
        plumbing_options = {'create_for_left': True}
        plumbing_options.update(options)
        return self.client.post('/api/templates/instantiate/', {
            'template_category_id': self.template.id,
            'shower_type_ids': shower_type_ids or [self.shower_type.id],
            'plumbing_options': plumbing_options,
        })

    def test_creates_full_copy(self):
        response = self._instantiate()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Template instantiation completed')
        task = response.data['data']
        self.assertEqual(task['status'], 'completed')
        self.assertEqual((task['success_count'], task['error_count']), (1, 0))

        category = Category.objects.get(pk=task['progress'][0]['category_id'])
        self.assertEqual(category.name, 'Shower Walls - left')
        self.assertEqual(category.slug, 'shower-walls-left')
        self.assertEqual(category.template_id, self.template.id)
        self.assertTrue(category.has_subcategories)

        subcategory = Subcategory.objects.get(category=category)
        self.assertEqual(subcategory.template_id, self.subcategory.id)
        panel = Product.objects.get(category=category, subcategory=subcategory)
        self.assertEqual(panel.template_id, self.panel.id)
        self.assertEqual(panel.variants.count(), 2)
        shelf = Product.objects.get(category=category, subcategory__isnull=True)
        self.assertEqual(shelf.slug, 'corner-shelf')

    def test_left_and_right_with_mirroring(self):
        response = self._instantiate(create_for_right=True, mirror_images=True)
        task = response.data['data']
        self.assertEqual(task['success_count'], 2)
        self.assertEqual([row['plumbing_config'] for row in task['progress']], ['LEFT', 'RIGHT'])

        left = ProductVariant.objects.get(product__category__plumbing_config='LEFT', color_name='Cream')
        right = ProductVariant.objects.get(product__category__plumbing_config='RIGHT', color_name='Cream')
        self.assertEqual(left.image_url, LEFT_IMAGE)
        self.assertIn('/upload/a_hflip/', right.image_url)
        self.assertEqual(right.plumbing_config, 'RIGHT')

    def test_without_mirroring_images_are_copied(self):
        self._instantiate(create_for_left=False, create_for_right=True)
        right = ProductVariant.objects.get(color_name='Cream')
        self.assertEqual(right.image_url, LEFT_IMAGE)

    def test_existing_instance_is_skipped(self):
        self._instantiate()
        response = self._instantiate()
        task = response.data['data']
        self.assertEqual(task['status'], 'failed')
        self.assertEqual(task['progress'][0]['status'], 'error')
        self.assertEqual(
            task['progress'][0]['message'], 'Template already instantiated for Alcove with left plumbing.'
        )
        self.assertEqual(Category.objects.filter(template=self.template).count(), 1)

    def test_slug_collision_is_reported(self):
        TestDataFactory.create_category(shower_type=self.shower_type, slug='shower-walls-left')
        task = self._instantiate().data['data']
        self.assertEqual(task['error_count'], 1)
        self.assertIn("Category with slug 'shower-walls-left' already exists", task['progress'][0]['message'])

    def test_missing_shower_type_does_not_block_others(self):
        response = self._instantiate(shower_type_ids=[9999, self.shower_type.id])
        task = response.data['data']
        self.assertEqual(task['status'], 'completed')
        self.assertEqual((task['success_count'], task['error_count']), (1, 1))
        self.assertEqual(task['progress'][0]['message'], 'Shower type not found')

    def test_custom_name(self):
        response = self.client.post('/api/templates/instantiate/', {
            'template_category_id': self.template.id,
            'shower_type_ids': [self.shower_type.id],
            'custom_name': 'Walls',
            'plumbing_options': {'create_for_left': True},
        })
        category_id = response.data['data']['progress'][0]['category_id']
        self.assertEqual(Category.objects.get(pk=category_id).name, 'Walls - left')

    def test_no_plumbing_option(self):
        response = self._instantiate(create_for_left=False)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'At least one plumbing option must be selected')

    def test_unknown_template(self):
        response = self.client.post('/api/templates/instantiate/', {
            'template_category_id': 9999,
            'shower_type_ids': [self.shower_type.id],
            'plumbing_options': {'create_for_left': True},
        })
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Template not found')

    def test_empty_shower_type_list(self):
        response = self.client.post('/api/templates/instantiate/', {
            'template_category_id': self.template.id,
            'shower_type_ids': [],
            'plumbing_options': {'create_for_left': True},
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('shower_type_ids', response.data['errors'])

    def test_requires_admin(self):
        response = APIClient().post('/api/templates/instantiate/', {
            'template_category_id': self.template.id,
            'shower_type_ids': [self.shower_type.id],
            'plumbing_options': {'create_for_left': True},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(Category.objects.exists())

    def test_instances_block_template_delete(self):
        self._instantiate()
        response = self.client.delete(f'/api/template-categories/{self.template.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_direct_call_loads_tree_once(self):
        template = load_template_tree(self.template.id)
        second_shower_type = TestDataFactory.create_shower_type()
        task = instantiate_template(
            template, [self.shower_type.id, second_shower_type.id], {'create_for_left': True}
        )
        self.assertEqual(task['success_count'], 2)
        self.assertEqual(Category.objects.filter(template=self.template).count(), 2)
        self.assertEqual(template.direct_products, [self.shelf])

    def test_unexpected_failure_is_recorded_and_others_continue(self):
        second_shower_type = TestDataFactory.create_shower_type()
        real_build = build_instance
        calls = []

        def fail_first(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                raise RuntimeError('asset lookup failed')
            return real_build(*args, **kwargs)

        generation = get_generation(SHOWER_TYPES_LIST)
        with patch('configurator.blueprints.instantiation.build_instance', side_effect=fail_first):
            with self.assertLogs('configurator.blueprints.instantiation', level='ERROR'):
                task = instantiate_template(
                    load_template_tree(self.template.id),
                    [self.shower_type.id, second_shower_type.id],
                    {'create_for_left': True}
                )

        self.assertEqual((task['success_count'], task['error_count']), (1, 1))
        self.assertEqual(task['status'], 'completed')
        self.assertEqual(task['progress'][0]['message'], 'Failed to create left plumbing instance')
        self.assertFalse(Category.objects.filter(shower_type=self.shower_type).exists())
        self.assertTrue(Category.objects.filter(shower_type=second_shower_type).exists())
        self.assertGreater(get_generation(SHOWER_TYPES_LIST), generation)


class SeedTemplatesCommandTests(TestCase):

    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command('seed_templates', stdout=out)
        call_command('seed_templates', stdout=out)

        template = TemplateCategory.objects.get(slug='shower-walls')
        subcategory = TemplateSubcategory.objects.get(template_category=template, slug='wall-panels')
        product = TemplateProduct.objects.get(template_subcategory=subcategory, slug='genova-wall-panel')
        self.assertEqual(product.template_category_id, template.id)
        self.assertEqual(
            sorted(product.template_variants.values_list('color_name', flat=True)), ['Cream', 'White Marble']
        )
        self.assertEqual(TemplateVariant.objects.count(), 2)

    def test_clear_removes_other_templates(self):
        TestDataFactory.create_template_variant()
        call_command('seed_templates', '--clear', stdout=StringIO())
        self.assertEqual(list(TemplateCategory.objects.values_list('slug', flat=True)), ['shower-walls'])
