import django_filters

from configurator.core.filters import ChoiceParamFilter, IdFilter, SearchFilter
from configurator.core.models import PlumbingConfig
from .models import ProjectType, ShowerType, Category, Subcategory, Product


class ProjectTypeFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('name', 'slug'))

    class Meta:
        model = ProjectType
        fields = ['search']


class ShowerTypeFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('name', 'slug'))
    project_type_id = IdFilter(field_name='project_type_id', resource='project type')

    class Meta:
        model = ShowerType
        fields = ['search', 'project_type_id']


class CategoryFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('name', 'slug'))
    shower_type_id = IdFilter(field_name='shower_type_id', resource='shower type')
    template_id = IdFilter(field_name='template_id', resource='template')
    plumbing_config = ChoiceParamFilter(field_name='plumbing_config', choices=PlumbingConfig.choices)

    class Meta:
        model = Category
        fields = ['search', 'shower_type_id', 'template_id', 'plumbing_config']


class SubcategoryFilter(django_filters.FilterSet):
    search = SearchFilter(search_fields=('name', 'slug'))
    category_id = IdFilter(field_name='category_id', resource='category')

    class Meta:
        model = Subcategory
        fields = ['search', 'category_id']


class ProductFilter(django_filters.FilterSet):
    """Filter for the product list: parent ids plus free-text search"""
    search = SearchFilter(search_fields=('name', 'slug', 'description'))
    category_id = IdFilter(field_name='category_id', resource='category')
    subcategory_id = IdFilter(field_name='subcategory_id', resource='subcategory')
    plumbing_config = ChoiceParamFilter(field_name='plumbing_config', choices=PlumbingConfig.choices)

    class Meta:
        model = Product
        fields = ['search', 'category_id', 'subcategory_id', 'plumbing_config']
