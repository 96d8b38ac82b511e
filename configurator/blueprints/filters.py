import django_filters

from configurator.core.filters import FlagFilter, IdFilter, SearchFilter
from .models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant


class TemplateCategoryFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('name', 'slug', 'description'))
    is_active = FlagFilter(field_name='is_active')

    class Meta:
        model = TemplateCategory
        fields = ['search', 'is_active']


class TemplateSubcategoryFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('name', 'slug', 'description'))
    template_category_id = IdFilter(field_name='template_category_id', resource='template category')

    class Meta:
        model = TemplateSubcategory
        fields = ['search', 'template_category_id']


class TemplateProductFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('name', 'slug', 'description'))
    template_category_id = IdFilter(field_name='template_category_id', resource='template category')
    template_subcategory_id = IdFilter(field_name='template_subcategory_id', resource='template subcategory')

    class Meta:
        model = TemplateProduct
        fields = ['search', 'template_category_id', 'template_subcategory_id']


class TemplateVariantFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('color_name', 'color_code'))
    template_product_id = IdFilter(field_name='template_product_id', resource='template product')

    class Meta:
        model = TemplateVariant
        fields = ['search', 'template_product_id']
