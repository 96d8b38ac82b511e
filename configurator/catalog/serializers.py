from rest_framework import serializers

from configurator.core.validators import normalize_color_code, validate_slug, validate_z_index
from .cloudinary_service import get_thumbnail_url
from .models import ProjectType, ShowerType, Category, Subcategory, Product, ProductVariant

SLUG_KWARGS = {'validators': [validate_slug]}
Z_INDEX_KWARGS = {'validators': [validate_z_index]}


def _count(obj, annotation, relation):
    """Prefer a queryset annotation, fall back to counting the relation"""
    value = getattr(obj, annotation, None)
    if value is None:
        value = getattr(obj, relation).count()
    return value


def _template_summary(template):
    if template is None:
        return None
    return {'id': template.id, 'name': template.name, 'slug': template.slug}


class ProjectTypeSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = ProjectType
        fields = ['id', 'name', 'slug']


class ShowerTypeSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = ShowerType
        fields = ['id', 'name', 'slug']


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'plumbing_config']


class SubcategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Subcategory
        fields = ['id', 'name', 'slug']


class ProjectTypeSerializer(serializers.ModelSerializer):
    shower_types_count = serializers.SerializerMethodField()

    class Meta:
        model = ProjectType
        fields = ['id', 'name', 'slug', 'image_url', 'shower_types_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS}

    def get_shower_types_count(self, obj):
        return _count(obj, 'num_shower_types', 'shower_types')


class ShowerTypeSerializer(serializers.ModelSerializer):
    project_type = ProjectTypeSummarySerializer(read_only=True)
    project_type_id = serializers.IntegerField(min_value=1)
    categories_count = serializers.SerializerMethodField()
    user_designs_count = serializers.SerializerMethodField()

    class Meta:
        model = ShowerType
        fields = ['id', 'name', 'slug', 'project_type', 'project_type_id', 'image_url',
                  'base_image_left', 'base_image_right', 'categories_count', 'user_designs_count',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS}

    def get_categories_count(self, obj):
        return _count(obj, 'num_categories', 'categories')

    def get_user_designs_count(self, obj):
        return _count(obj, 'num_user_designs', 'user_designs')


class ProjectTypeDetailSerializer(ProjectTypeSerializer):
    shower_types = serializers.SerializerMethodField()

    class Meta(ProjectTypeSerializer.Meta):
        fields = ProjectTypeSerializer.Meta.fields + ['shower_types']

    def get_shower_types(self, obj):
        shower_types = obj.shower_types.select_related('project_type').order_by('name')
        return ShowerTypeSerializer(shower_types, many=True).data


class ProductVariantSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(min_value=1)
    template_variant_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    preview_url = serializers.SerializerMethodField()

    class Meta:
        model = ProductVariant
        fields = ['id', 'color_name', 'color_code', 'image_url', 'preview_url', 'public_id',
                  'product_id', 'template_variant_id', 'plumbing_config', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        validators = []

    def validate_color_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Color name is required')
        return value

    def validate_color_code(self, value):
        return normalize_color_code(value)

    def get_preview_url(self, obj):
        return get_thumbnail_url(obj.image_url) if obj.image_url else None


class ProductSerializer(serializers.ModelSerializer):
    category = CategorySummarySerializer(read_only=True)
    category_id = serializers.IntegerField(min_value=1)
    subcategory = SubcategorySummarySerializer(read_only=True)
    subcategory_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    template_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    variants = serializers.SerializerMethodField()
    variants_count = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'slug', 'description', 'thumbnail_url', 'category', 'category_id',
                  'subcategory', 'subcategory_id', 'template_id', 'z_index', 'plumbing_config',
                  'variants', 'variants_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS, 'z_index': Z_INDEX_KWARGS}
        validators = []

    def get_variants(self, obj):
        variants = sorted(obj.variants.all(), key=lambda variant: variant.color_name)
        return ProductVariantSerializer(variants, many=True).data

    def get_variants_count(self, obj):
        return _count(obj, 'num_variants', 'variants')


class SubcategorySerializer(serializers.ModelSerializer):
    category = CategorySummarySerializer(read_only=True)
    category_id = serializers.IntegerField(min_value=1)
    template_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    template = serializers.SerializerMethodField()
    products_count = serializers.SerializerMethodField()

    class Meta:
        model = Subcategory
        fields = ['id', 'name', 'slug', 'category', 'category_id', 'template', 'template_id',
                  'z_index', 'plumbing_config', 'products_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS, 'z_index': Z_INDEX_KWARGS}
        validators = []

    def get_template(self, obj):
        return _template_summary(obj.template)

    def get_products_count(self, obj):
        return _count(obj, 'num_products', 'products')


class SubcategoryDetailSerializer(SubcategorySerializer):
    products = serializers.SerializerMethodField()

    class Meta(SubcategorySerializer.Meta):
        fields = SubcategorySerializer.Meta.fields + ['products']

    def get_products(self, obj):
        products = obj.products.select_related('category', 'subcategory').prefetch_related('variants')
        return ProductSerializer(products.order_by('z_index', 'name'), many=True).data


class CategorySerializer(serializers.ModelSerializer):
    shower_type = ShowerTypeSummarySerializer(read_only=True)
    shower_type_id = serializers.IntegerField(min_value=1)
    template = serializers.SerializerMethodField()
    template_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    subcategories_count = serializers.SerializerMethodField()
    products_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'has_subcategories', 'shower_type', 'shower_type_id',
                  'template', 'template_id', 'z_index', 'plumbing_config',
                  'subcategories_count', 'products_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS, 'z_index': Z_INDEX_KWARGS}
        validators = []

    def get_template(self, obj):
        return _template_summary(obj.template)

    def get_subcategories_count(self, obj):
        return _count(obj, 'num_subcategories', 'subcategories')

    def get_products_count(self, obj):
        return _count(obj, 'num_products', 'products')


class CategoryDetailSerializer(CategorySerializer):
    subcategories = serializers.SerializerMethodField()
    products = serializers.SerializerMethodField()

    class Meta(CategorySerializer.Meta):
        fields = CategorySerializer.Meta.fields + ['subcategories', 'products']

    def get_subcategories(self, obj):
        subcategories = obj.subcategories.select_related('category', 'template').order_by('z_index', 'name')
        return SubcategorySerializer(subcategories, many=True).data

    def get_products(self, obj):
        products = obj.products.select_related('category', 'subcategory').prefetch_related('variants')
        return ProductSerializer(products.order_by('z_index', 'name'), many=True).data


class CustomerCategorySerializer(CategorySerializer):
    """Category as shown to shoppers, optionally with its purchasable products"""
    products = serializers.SerializerMethodField()

    class Meta(CategorySerializer.Meta):
        fields = CategorySerializer.Meta.fields + ['products']

    def get_products(self, obj):
        products = getattr(obj, 'visible_products', None)
        if products is None:
            return None
        return ProductSerializer(products, many=True).data


class ShowerTypeDetailSerializer(ShowerTypeSerializer):
    categories = serializers.SerializerMethodField()

    class Meta(ShowerTypeSerializer.Meta):
        fields = ShowerTypeSerializer.Meta.fields + ['categories']

    def get_categories(self, obj):
        categories = obj.categories.select_related('shower_type', 'template').order_by('z_index', 'name')
        return CategorySerializer(categories, many=True).data
