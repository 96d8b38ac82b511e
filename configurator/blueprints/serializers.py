from rest_framework import serializers

from configurator.catalog.serializers import ShowerTypeSummarySerializer
from configurator.catalog.models import Category
from configurator.core.validators import normalize_color_code, validate_slug
from .models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant

SLUG_KWARGS = {'validators': [validate_slug]}


def _count(obj, annotation, relation):
    value = getattr(obj, annotation, None)
    if value is None:
        value = getattr(obj, relation).count()
    return value


class TemplateCategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = TemplateCategory
        fields = ['id', 'name', 'slug']


class TemplateSubcategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = TemplateSubcategory
        fields = ['id', 'name', 'slug']


class TemplateInstanceSerializer(serializers.ModelSerializer):
    """A category generated from a template"""
    shower_type = ShowerTypeSummarySerializer(read_only=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'plumbing_config', 'shower_type', 'created_at']


class TemplateVariantSerializer(serializers.ModelSerializer):
    template_product_id = serializers.IntegerField(min_value=1)
    product_variants_count = serializers.SerializerMethodField()

    class Meta:
        model = TemplateVariant
        fields = ['id', 'color_name', 'color_code', 'image_url', 'public_id', 'template_product_id',
                  'plumbing_config', 'product_variants_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        validators = []

    def validate_color_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Color name is required')
        return value

    def validate_color_code(self, value):
        return normalize_color_code(value)

    def get_product_variants_count(self, obj):
        return _count(obj, 'num_product_variants', 'product_variants')


class TemplateProductSerializer(serializers.ModelSerializer):
    template_category = TemplateCategorySummarySerializer(read_only=True)
    template_category_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    template_subcategory = TemplateSubcategorySummarySerializer(read_only=True)
    template_subcategory_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    template_variants = serializers.SerializerMethodField()
    instances_count = serializers.SerializerMethodField()

    class Meta:
        model = TemplateProduct
        fields = ['id', 'name', 'slug', 'description', 'thumbnail_url',
                  'template_category', 'template_category_id',
                  'template_subcategory', 'template_subcategory_id',
                  'template_variants', 'instances_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS}
        validators = []

    def get_template_variants(self, obj):
        variants = sorted(obj.template_variants.all(), key=lambda variant: variant.color_name)
        return TemplateVariantSerializer(variants, many=True).data

    def get_instances_count(self, obj):
        return _count(obj, 'num_instances', 'products')


class TemplateSubcategorySerializer(serializers.ModelSerializer):
    template_category = TemplateCategorySummarySerializer(read_only=True)
    template_category_id = serializers.IntegerField(min_value=1)
    template_products_count = serializers.SerializerMethodField()
    instances_count = serializers.SerializerMethodField()

    class Meta:
        model = TemplateSubcategory
        fields = ['id', 'name', 'slug', 'description', 'template_category', 'template_category_id',
                  'template_products_count', 'instances_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS}
        validators = []

    def get_template_products_count(self, obj):
        return _count(obj, 'num_template_products', 'template_products')

    def get_instances_count(self, obj):
        return _count(obj, 'num_instances', 'subcategories')


class TemplateSubcategoryDetailSerializer(TemplateSubcategorySerializer):
    template_products = serializers.SerializerMethodField()

    class Meta(TemplateSubcategorySerializer.Meta):
        fields = TemplateSubcategorySerializer.Meta.fields + ['template_products']

    def get_template_products(self, obj):
        products = obj.template_products.select_related(
            'template_category', 'template_subcategory'
        ).prefetch_related('template_variants').order_by('name')
        return TemplateProductSerializer(products, many=True).data


class TemplateCategorySerializer(serializers.ModelSerializer):
    subcategories_count = serializers.SerializerMethodField()
    products_count = serializers.SerializerMethodField()
    instances_count = serializers.SerializerMethodField()

    class Meta:
        model = TemplateCategory
        fields = ['id', 'name', 'slug', 'description', 'is_active', 'subcategories_count',
                  'products_count', 'instances_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'slug': SLUG_KWARGS}

    def get_subcategories_count(self, obj):
        return _count(obj, 'num_subcategories', 'template_subcategories')

    def get_products_count(self, obj):
        return _count(obj, 'num_products', 'template_products')

    def get_instances_count(self, obj):
        return _count(obj, 'num_instances', 'categories')


class TemplateCategoryDetailSerializer(TemplateCategorySerializer):
    template_subcategories = serializers.SerializerMethodField()
    template_products = serializers.SerializerMethodField()
    instances = serializers.SerializerMethodField()

    class Meta(TemplateCategorySerializer.Meta):
        fields = TemplateCategorySerializer.Meta.fields + [
            'template_subcategories', 'template_products', 'instances'
        ]

    def get_template_subcategories(self, obj):
        subcategories = obj.template_subcategories.select_related('template_category').order_by('name')
        return TemplateSubcategorySerializer(subcategories, many=True).data

    def get_template_products(self, obj):
        """Products placed directly on the template, outside any subcategory"""
        products = obj.template_products.filter(template_subcategory__isnull=True).select_related(
            'template_category', 'template_subcategory'
        ).prefetch_related('template_variants').order_by('name')
        return TemplateProductSerializer(products, many=True).data

    def get_instances(self, obj):
        categories = obj.categories.select_related('shower_type').order_by('shower_type__name', 'plumbing_config')
        return TemplateInstanceSerializer(categories, many=True).data


class PlumbingOptionsSerializer(serializers.Serializer):
    create_for_left = serializers.BooleanField(default=False)
    create_for_right = serializers.BooleanField(default=False)
    mirror_images = serializers.BooleanField(default=False)


class InstantiateTemplateSerializer(serializers.Serializer):
    template_category_id = serializers.IntegerField(min_value=1)
    shower_type_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1), allow_empty=False
    )
    custom_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)
    plumbing_options = PlumbingOptionsSerializer()

    def validate_shower_type_ids(self, value):
        # keep the caller's order, drop repeats
        return list(dict.fromkeys(value))
