from django.urls import path
from .views import (
    template_category_list_create, template_category_detail,
    template_subcategory_list_create, template_subcategory_detail,
    template_product_list_create, template_product_detail,
    template_variant_list_create, template_variant_detail,
    template_instantiate
)

urlpatterns = [
    # Template category endpoints
    path('template-categories/', template_category_list_create, name='template-category-list-create'),
    path('template-categories/<str:pk>/', template_category_detail, name='template-category-detail'),

    # Template subcategory endpoints
    path('template-subcategories/', template_subcategory_list_create, name='template-subcategory-list-create'),
    path('template-subcategories/<str:pk>/', template_subcategory_detail, name='template-subcategory-detail'),

    # Template product endpoints
    path('template-products/', template_product_list_create, name='template-product-list-create'),
    path('template-products/<str:pk>/', template_product_detail, name='template-product-detail'),

    # Template variant endpoints
    path('template-variants/', template_variant_list_create, name='template-variant-list-create'),
    path('template-variants/<str:pk>/', template_variant_detail, name='template-variant-detail'),

    # Instantiation
    path('templates/instantiate/', template_instantiate, name='template-instantiate'),
]
