from django.urls import path
from .views import (
    project_type_list_create, project_type_detail,
    shower_type_list_create, shower_type_detail,
    category_list_create, category_detail,
    subcategory_list_create, subcategory_detail,
    product_list_create, product_detail,
    variant_list_create, variant_detail,
    image_upload
)

urlpatterns = [
    # Project type endpoints
    path('project-types/', project_type_list_create, name='project-type-list-create'),
    path('project-types/<str:pk>/', project_type_detail, name='project-type-detail'),

    # Shower type endpoints
    path('shower-types/', shower_type_list_create, name='shower-type-list-create'),
    path('shower-types/<str:pk>/', shower_type_detail, name='shower-type-detail'),

    # Category endpoints
    path('categories/', category_list_create, name='category-list-create'),
    path('categories/<str:pk>/', category_detail, name='category-detail'),

    # Subcategory endpoints
    path('subcategories/', subcategory_list_create, name='subcategory-list-create'),
    path('subcategories/<str:pk>/', subcategory_detail, name='subcategory-detail'),

    # Product endpoints
    path('products/', product_list_create, name='product-list-create'),
    path('products/<str:pk>/', product_detail, name='product-detail'),

    # Color variant endpoints
    path('variants/', variant_list_create, name='variant-list-create'),
    path('variants/<str:pk>/', variant_detail, name='variant-detail'),

    # Image storage
    path('upload/', image_upload, name='image-upload'),
]
