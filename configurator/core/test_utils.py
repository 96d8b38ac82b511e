"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from configurator.catalog.models import ProjectType, ShowerType, Category, Subcategory, Product, ProductVariant
from configurator.blueprints.models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant
from configurator.designs.models import UserDesign
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_slug(prefix):
        return f'{prefix}-{TestDataFactory.random_string(6).lower()}'

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False,
                    full_name=''):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser,
            full_name=full_name
        )

    @staticmethod
    def create_admin(**kwargs):
        """Create a staff user allowed to change the catalog"""
        return TestDataFactory.create_user(is_staff=True, **kwargs)

    @staticmethod
    def create_project_type(name=None, slug=None):
        if not name:
            name = f'Project_{TestDataFactory.random_string(6)}'
        return ProjectType.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('project')
        )

    @staticmethod
    def create_shower_type(name=None, slug=None, project_type=None):
        if not name:
            name = f'Shower_{TestDataFactory.random_string(6)}'
        if not project_type:
            project_type = TestDataFactory.create_project_type()
        return ShowerType.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('shower'),
            project_type=project_type
        )

    @staticmethod
    def create_category(name=None, slug=None, shower_type=None, z_index=50, plumbing_config='LEFT',
                        template=None):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        if not shower_type:
            shower_type = TestDataFactory.create_shower_type()
        return Category.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('category'),
            shower_type=shower_type,
            z_index=z_index,
            plumbing_config=plumbing_config,
            template=template
        )

    @staticmethod
    def create_subcategory(name=None, slug=None, category=None, z_index=50):
        if not name:
            name = f'Subcategory_{TestDataFactory.random_string(6)}'
        if not category:
            category = TestDataFactory.create_category()
        subcategory = Subcategory.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('subcategory'),
            category=category,
            z_index=z_index,
            plumbing_config=category.plumbing_config
        )
        if not category.has_subcategories:
            category.has_subcategories = True
            category.save(update_fields=['has_subcategories'])
        return subcategory

    @staticmethod
    def create_product(name=None, slug=None, category=None, subcategory=None, z_index=50):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if subcategory and not category:
            category = subcategory.category
        if not category:
            category = TestDataFactory.create_category()
        return Product.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('product'),
            category=category,
            subcategory=subcategory,
            z_index=z_index,
            plumbing_config=category.plumbing_config
        )

    @staticmethod
    def create_variant(product=None, color_name=None, color_code='#FFFFFF', image_url=None, public_id=None):
        if not product:
            product = TestDataFactory.create_product()
        if not color_name:
            color_name = f'Color_{TestDataFactory.random_string(6)}'
        return ProductVariant.objects.create(
            product=product,
            color_name=color_name,
            color_code=color_code,
            image_url=image_url or 'https://res.cloudinary.com/demo/image/upload/v1/bath-fitter/test/panel.png',
            public_id=public_id
        )

    @staticmethod
    def create_template_category(name=None, slug=None, is_active=True):
        if not name:
            name = f'Template_{TestDataFactory.random_string(6)}'
        return TemplateCategory.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('template'),
            description=f'Test template {name}',
            is_active=is_active
        )

    @staticmethod
    def create_template_subcategory(name=None, slug=None, template_category=None):
        if not name:
            name = f'TemplateSub_{TestDataFactory.random_string(6)}'
        if not template_category:
            template_category = TestDataFactory.create_template_category()
        return TemplateSubcategory.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('template-sub'),
            template_category=template_category
        )

    @staticmethod
    def create_template_product(name=None, slug=None, template_category=None, template_subcategory=None):
        if not name:
            name = f'TemplateProduct_{TestDataFactory.random_string(6)}'
        if template_subcategory and not template_category:
            template_category = template_subcategory.template_category
        if not template_category:
            template_category = TestDataFactory.create_template_category()
        return TemplateProduct.objects.create(
            name=name,
            slug=slug or TestDataFactory.random_slug('template-product'),
            template_category=template_category,
            template_subcategory=template_subcategory
        )

    @staticmethod
    def create_template_variant(template_product=None, color_name=None, color_code='#FFFFFF', image_url=None,
                                plumbing_config='LEFT'):
        if not template_product:
            template_product = TestDataFactory.create_template_product()
        if not color_name:
            color_name = f'Color_{TestDataFactory.random_string(6)}'
        return TemplateVariant.objects.create(
            template_product=template_product,
            color_name=color_name,
            color_code=color_code,
            image_url=image_url or 'https://res.cloudinary.com/demo/image/upload/v1/bath-fitter/templates/panel.png',
            plumbing_config=plumbing_config
        )

    @staticmethod
    def create_user_design(shower_type=None, email='customer@example.com', design_data=None):
        if not shower_type:
            shower_type = TestDataFactory.create_shower_type()
        return UserDesign.objects.create(
            user_full_name='Jane Customer',
            user_email=email,
            user_phone='555-123-4567',
            user_postal_code='M5V 2T6',
            design_data=design_data if design_data is not None else {'layers': []},
            shower_type=shower_type
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
