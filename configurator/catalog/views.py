import logging

from django.conf import settings
from django.db.models import Count, Prefetch
from PIL import Image, UnidentifiedImageError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from configurator.blueprints.models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant
from configurator.core.cache_utils import PROJECT_TYPES_LIST, SHOWER_TYPES_LIST, cache_list, get_cached_list
from configurator.core.exceptions import BadRequestError, NotFoundError
from configurator.core.filters import apply_filters
from configurator.core.models import DEFAULT_Z_INDEX
from configurator.core.permissions import IsAdmin, IsAdminOrReadOnly
from configurator.core.responses import (
    add_cache_headers, paginate_queryset, paginated_body, paginated_response, success_response
)
from configurator.core.utils import (
    ensure_unique, get_object_or_error, get_related_or_error, request_value, validate_request
)
from configurator.core.validators import parse_bool_param, parse_id_param, resolve_z_index
from .cloudinary_service import delete_image, delete_image_by_url, extract_public_id, upload_image
from .filters import ProjectTypeFilter, ShowerTypeFilter, CategoryFilter, SubcategoryFilter, ProductFilter
from .models import ProjectType, ShowerType, Category, Subcategory, Product, ProductVariant
from .serializers import (
    ProjectTypeSerializer, ProjectTypeDetailSerializer,
    ShowerTypeSerializer, ShowerTypeDetailSerializer,
    CategorySerializer, CategoryDetailSerializer, CustomerCategorySerializer,
    SubcategorySerializer, SubcategoryDetailSerializer,
    ProductSerializer, ProductVariantSerializer
)

logger = logging.getLogger(__name__)


def _product_queryset():
    return Product.objects.select_related('category', 'subcategory').prefetch_related(
        Prefetch('variants', queryset=ProductVariant.objects.order_by('color_name'))
    )


# Project type views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def project_type_list_create(request):
    """List project types (public, cached) or create one"""
    if request.method == 'GET':
        params = request.query_params
        cached_data, cache_key = get_cached_list(PROJECT_TYPES_LIST, params.dict())
        if cached_data is not None:
            return add_cache_headers(Response(cached_data))

        queryset = ProjectType.objects.annotate(num_shower_types=Count('shower_types')).order_by('name')
        queryset = apply_filters(ProjectTypeFilter, params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, params)
        body = paginated_body(ProjectTypeSerializer(rows, many=True).data, page, limit, total)
        cache_list(cache_key, body)
        return add_cache_headers(Response(body))

    serializer = validate_request(ProjectTypeSerializer, request)
    ensure_unique(
        ProjectType.objects.filter(slug=serializer.validated_data['slug']),
        'Project type with this slug already exists'
    )
    project_type = serializer.save()
    logger.info(f"Created project type {project_type.id} ({project_type.slug})")
    return success_response(
        ProjectTypeSerializer(project_type).data,
        'Project type created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def project_type_detail(request, pk):
    """Retrieve, update or delete a project type"""
    project_type = get_object_or_error(ProjectType.objects.all(), pk, 'Project type')

    if request.method == 'GET':
        return success_response(ProjectTypeDetailSerializer(project_type).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(ProjectTypeSerializer, request, project_type)
        if 'slug' in serializer.validated_data:
            ensure_unique(
                ProjectType.objects.filter(slug=serializer.validated_data['slug']),
                'Project type with this slug already exists',
                exclude_pk=project_type.pk
            )
        project_type = serializer.save()
        return success_response(ProjectTypeSerializer(project_type).data, 'Project type updated successfully')

    shower_types_count = project_type.shower_types.count()
    if shower_types_count:
        raise BadRequestError(
            f'Cannot delete project type with {shower_types_count} associated shower type(s)'
        )
    project_type_id = project_type.id
    project_type.delete()
    logger.info(f"Deleted project type {project_type_id}")
    return success_response({'id': project_type_id}, 'Project type deleted successfully')


# Shower type views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def shower_type_list_create(request):
    """List shower types (public, cached) or create one"""
    if request.method == 'GET':
        params = request.query_params
        cached_data, cache_key = get_cached_list(SHOWER_TYPES_LIST, params.dict())
        if cached_data is not None:
            return add_cache_headers(Response(cached_data))

        queryset = ShowerType.objects.select_related('project_type').annotate(
            num_categories=Count('categories', distinct=True),
            num_user_designs=Count('user_designs', distinct=True),
        ).order_by('name')
        queryset = apply_filters(ShowerTypeFilter, params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, params)
        body = paginated_body(ShowerTypeSerializer(rows, many=True).data, page, limit, total)
        cache_list(cache_key, body)
        return add_cache_headers(Response(body))

    serializer = validate_request(ShowerTypeSerializer, request)
    get_related_or_error(ProjectType, serializer.validated_data['project_type_id'], 'Project type')
    ensure_unique(
        ShowerType.objects.filter(slug=serializer.validated_data['slug']),
        'Shower type with this slug already exists'
    )
    shower_type = serializer.save()
    logger.info(f"Created shower type {shower_type.id} ({shower_type.slug})")
    return success_response(
        ShowerTypeSerializer(shower_type).data,
        'Shower type created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def shower_type_detail(request, pk):
    """Retrieve, update or delete a shower type"""
    shower_type = get_object_or_error(ShowerType.objects.select_related('project_type'), pk, 'Shower type')

    if request.method == 'GET':
        return success_response(ShowerTypeDetailSerializer(shower_type).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(ShowerTypeSerializer, request, shower_type)
        data = serializer.validated_data
        if 'project_type_id' in data:
            get_related_or_error(ProjectType, data['project_type_id'], 'Project type')
        if 'slug' in data:
            ensure_unique(
                ShowerType.objects.filter(slug=data['slug']),
                'Shower type with this slug already exists',
                exclude_pk=shower_type.pk
            )
        shower_type = serializer.save()
        return success_response(ShowerTypeSerializer(shower_type).data, 'Shower type updated successfully')

    if shower_type.categories.exists() or shower_type.user_designs.exists():
        raise BadRequestError(
            'Cannot delete shower type that has categories or user designs. Please remove them first.'
        )
    shower_type_id = shower_type.id
    shower_type.delete()
    logger.info(f"Deleted shower type {shower_type_id}")
    return success_response({'id': shower_type_id}, 'Shower type deleted successfully')


# Category views
def _category_admin_queryset():
    return Category.objects.select_related('shower_type', 'template').annotate(
        num_subcategories=Count('subcategories', distinct=True),
        num_products=Count('products', distinct=True),
    )


def _customer_categories(params):
    """
    Categories of one shower type that have something to show.

    With include_products only products that have at least one variant count,
    and each category carries them as ``visible_products``.
    """
    raw_shower_type_id = params.get('shower_type_id')
    if not raw_shower_type_id:
        raise BadRequestError('shower_type_id is required for customer-facing API')
    shower_type_id = parse_id_param(raw_shower_type_id, 'shower type')

    queryset = _category_admin_queryset().filter(
        shower_type_id=shower_type_id,
        id__in=Product.objects.values('category_id'),
    ).order_by('name')
    queryset = apply_filters(CategoryFilter, params, queryset)

    if not parse_bool_param(params.get('include_products')):
        return list(queryset)

    visible_products = _product_queryset().filter(
        id__in=ProductVariant.objects.values('product_id')
    ).order_by('z_index', 'name')
    categories = queryset.prefetch_related(
        Prefetch('products', queryset=visible_products, to_attr='visible_products')
    )
    return [category for category in categories if category.visible_products]


@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def category_list_create(request):
    """
    GET ?for_admin=true: paginated list of every category for the back office.
    GET ?shower_type_id=N[&include_products=true]: what a shopper can pick from.
    POST: create a category.
    """
    if request.method == 'GET':
        params = request.query_params
        if parse_bool_param(params.get('for_admin')):
            queryset = apply_filters(CategoryFilter, params, _category_admin_queryset().order_by('name'))
            rows, page, limit, total = paginate_queryset(queryset, params)
            return paginated_response(CategorySerializer(rows, many=True).data, page, limit, total)

        categories = _customer_categories(params)
        return success_response(CustomerCategorySerializer(categories, many=True).data)

    serializer = validate_request(CategorySerializer, request)
    data = serializer.validated_data
    get_related_or_error(TemplateCategory, data.get('template_id'), 'Template')
    get_related_or_error(ShowerType, data['shower_type_id'], 'Shower type')
    ensure_unique(
        Category.objects.filter(shower_type_id=data['shower_type_id'], slug=data['slug']),
        'Category with this slug already exists in this shower type'
    )
    z_index = data.get('z_index')
    category = serializer.save(z_index=DEFAULT_Z_INDEX if z_index is None else z_index)
    logger.info(f"Created category {category.id} ({category.slug}) for shower type {category.shower_type_id}")
    return success_response(
        CategorySerializer(category).data,
        'Category created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_error(Category.objects.select_related('shower_type', 'template'), pk, 'Category')

    if request.method == 'GET':
        return success_response(CategoryDetailSerializer(category).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(CategorySerializer, request, category)
        data = serializer.validated_data
        if 'template_id' in data:
            get_related_or_error(TemplateCategory, data['template_id'], 'Template')
        if 'shower_type_id' in data:
            get_related_or_error(ShowerType, data['shower_type_id'], 'Shower type')
        if 'slug' in data or 'shower_type_id' in data:
            ensure_unique(
                Category.objects.filter(
                    shower_type_id=request_value(data, category, 'shower_type_id'),
                    slug=request_value(data, category, 'slug'),
                ),
                'Category with this slug already exists in this shower type',
                exclude_pk=category.pk
            )
        category = serializer.save()
        return success_response(CategorySerializer(category).data, 'Category updated successfully')

    if category.subcategories.exists() or category.products.exists():
        raise BadRequestError(
            'Cannot delete category that has subcategories or products. Please remove them first.'
        )
    category_id = category.id
    category.delete()
    logger.info(f"Deleted category {category_id}")
    return success_response({'id': category_id}, 'Category deleted successfully')


# Subcategory views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def subcategory_list_create(request):
    """List subcategories or create one"""
    if request.method == 'GET':
        queryset = Subcategory.objects.select_related('category', 'template').annotate(
            num_products=Count('products')
        ).order_by('z_index', 'name')
        queryset = apply_filters(SubcategoryFilter, request.query_params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, request.query_params)
        return paginated_response(SubcategorySerializer(rows, many=True).data, page, limit, total)

    serializer = validate_request(SubcategorySerializer, request)
    data = serializer.validated_data
    category = get_related_or_error(Category, data['category_id'], 'Category')
    get_related_or_error(TemplateSubcategory, data.get('template_id'), 'Template subcategory')
    ensure_unique(
        Subcategory.objects.filter(category=category, slug=data['slug']),
        'Subcategory with this slug already exists in this category'
    )
    subcategory = serializer.save(z_index=resolve_z_index(data.get('z_index'), category=category))
    if not category.has_subcategories:
        category.has_subcategories = True
        category.save(update_fields=['has_subcategories', 'updated_at'])
    logger.info(f"Created subcategory {subcategory.id} ({subcategory.slug}) in category {category.id}")
    return success_response(
        SubcategorySerializer(subcategory).data,
        'Subcategory created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def subcategory_detail(request, pk):
    """Retrieve, update or delete a subcategory"""
    subcategory = get_object_or_error(
        Subcategory.objects.select_related('category', 'template'), pk, 'Subcategory'
    )

    if request.method == 'GET':
        return success_response(SubcategoryDetailSerializer(subcategory).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(SubcategorySerializer, request, subcategory)
        data = serializer.validated_data
        if 'category_id' in data:
            get_related_or_error(Category, data['category_id'], 'Category')
        if 'template_id' in data:
            get_related_or_error(TemplateSubcategory, data['template_id'], 'Template subcategory')
        if 'slug' in data or 'category_id' in data:
            ensure_unique(
                Subcategory.objects.filter(
                    category_id=request_value(data, subcategory, 'category_id'),
                    slug=request_value(data, subcategory, 'slug'),
                ),
                'Subcategory with this slug already exists in this category',
                exclude_pk=subcategory.pk
            )
        subcategory = serializer.save()
        return success_response(SubcategorySerializer(subcategory).data, 'Subcategory updated successfully')

    if subcategory.products.exists():
        raise BadRequestError('Cannot delete subcategory that has products. Please remove them first.')
    subcategory_id = subcategory.id
    subcategory.delete()
    logger.info(f"Deleted subcategory {subcategory_id}")
    return success_response({'id': subcategory_id}, 'Subcategory deleted successfully')


# Product views
def _product_scope(category_id, subcategory_id):
    """Products whose slugs must differ from a product placed at this parent"""
    if subcategory_id:
        return Product.objects.filter(subcategory_id=subcategory_id)
    return Product.objects.filter(category_id=category_id, subcategory__isnull=True)


def _resolve_product_parents(category_id, subcategory_id):
    category = get_related_or_error(Category, category_id, 'Category')
    subcategory = None
    if subcategory_id:
        subcategory = Subcategory.objects.filter(pk=subcategory_id, category=category).first()
        if subcategory is None:
            raise NotFoundError('Subcategory in this category')
    return category, subcategory


@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def product_list_create(request):
    """List products ordered by layer then name, or create one"""
    if request.method == 'GET':
        params = request.query_params
        queryset = _product_queryset().annotate(num_variants=Count('variants')).order_by('z_index', 'name')
        queryset = apply_filters(ProductFilter, params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, params)
        message = f'Found {total} product(s)' if params.get('search', '').strip() else None
        return paginated_response(ProductSerializer(rows, many=True).data, page, limit, total, message)

    serializer = validate_request(ProductSerializer, request)
    data = serializer.validated_data
    category, subcategory = _resolve_product_parents(data['category_id'], data.get('subcategory_id'))
    get_related_or_error(TemplateProduct, data.get('template_id'), 'Template product')
    ensure_unique(
        _product_scope(category.id, data.get('subcategory_id')).filter(slug=data['slug']),
        'Product with this slug already exists'
    )
    product = serializer.save(z_index=resolve_z_index(data.get('z_index'), subcategory, category))
    logger.info(f"Created product {product.id} ({product.slug}) in category {category.id}")
    return success_response(
        ProductSerializer(product).data,
        'Product created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_error(_product_queryset(), pk, 'Product')

    if request.method == 'GET':
        return success_response(ProductSerializer(product).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(ProductSerializer, request, product)
        data = serializer.validated_data
        category_id = request_value(data, product, 'category_id')
        subcategory_id = request_value(data, product, 'subcategory_id')
        _resolve_product_parents(category_id, subcategory_id)
        if 'template_id' in data:
            get_related_or_error(TemplateProduct, data['template_id'], 'Template product')
        if {'slug', 'category_id', 'subcategory_id'} & set(data):
            ensure_unique(
                _product_scope(category_id, subcategory_id).filter(slug=request_value(data, product, 'slug')),
                'Product with this slug already exists',
                exclude_pk=product.pk
            )
        old_thumbnail = product.thumbnail_url
        product = serializer.save()
        if old_thumbnail and old_thumbnail != product.thumbnail_url:
            delete_image_by_url(old_thumbnail)
        return success_response(ProductSerializer(product).data, 'Product updated successfully')

    variants_count = product.variants.count()
    if variants_count:
        raise BadRequestError('Cannot delete product that has variants. Please remove them first.')
    product_id = product.id
    thumbnail_url = product.thumbnail_url
    product.delete()
    delete_image_by_url(thumbnail_url)
    logger.info(f"Deleted product {product_id}")
    return success_response({'id': product_id}, 'Product deleted successfully')


# Variant views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def variant_list_create(request):
    """List a product's color variants or add one"""
    if request.method == 'GET':
        raw_product_id = request.query_params.get('product_id')
        if not raw_product_id:
            raise BadRequestError('product_id is required')
        product_id = parse_id_param(raw_product_id, 'product')
        variants = ProductVariant.objects.filter(product_id=product_id).order_by('color_name')
        return success_response(ProductVariantSerializer(variants, many=True).data)

    serializer = validate_request(ProductVariantSerializer, request)
    data = serializer.validated_data
    product = get_related_or_error(Product, data['product_id'], 'Product')
    get_related_or_error(TemplateVariant, data.get('template_variant_id'), 'Template variant')
    ensure_unique(
        ProductVariant.objects.filter(product=product, color_name=data['color_name']),
        'Variant with this color name already exists in this product'
    )
    variant = serializer.save()
    logger.info(f"Created variant {variant.id} ({variant.color_name}) for product {product.id}")
    return success_response(
        ProductVariantSerializer(variant).data,
        'Variant created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def variant_detail(request, pk):
    """Retrieve, update or delete a color variant"""
    variant = get_object_or_error(ProductVariant.objects.all(), pk, 'Variant')

    if request.method == 'GET':
        return success_response(ProductVariantSerializer(variant).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(ProductVariantSerializer, request, variant)
        data = serializer.validated_data
        if 'product_id' in data:
            get_related_or_error(Product, data['product_id'], 'Product')
        if 'template_variant_id' in data:
            get_related_or_error(TemplateVariant, data['template_variant_id'], 'Template variant')
        if 'color_name' in data or 'product_id' in data:
            ensure_unique(
                ProductVariant.objects.filter(
                    product_id=request_value(data, variant, 'product_id'),
                    color_name=request_value(data, variant, 'color_name'),
                ),
                'Variant with this color name already exists in this product',
                exclude_pk=variant.pk
            )
        old_image_url, old_public_id = variant.image_url, variant.public_id
        variant = serializer.save()
        if old_image_url and old_image_url != variant.image_url:
            delete_image_by_url(old_image_url, old_public_id)
        return success_response(ProductVariantSerializer(variant).data, 'Variant updated successfully')

    variant_id = variant.id
    image_url, public_id = variant.image_url, variant.public_id
    variant.delete()
    delete_image_by_url(image_url, public_id)
    logger.info(f"Deleted variant {variant_id}")
    return success_response({'id': variant_id}, 'Variant deleted successfully')


# Image upload views
def _validate_image_file(upload):
    max_size = settings.MAX_UPLOAD_SIZE
    if upload.size > max_size:
        raise BadRequestError(f'File is too large. Maximum size is {max_size // (1024 * 1024)} MB')
    try:
        with Image.open(upload) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise BadRequestError('Uploaded file is not a valid image')
    finally:
        upload.seek(0)


@api_view(['POST', 'DELETE'])
@permission_classes([IsAdmin])
def image_upload(request):
    """
    POST (multipart): store ``file`` under ``folder``; an ``existing_image_url``
    being replaced is removed first.
    DELETE: remove the stored image at ``image_url``.
    """
    if request.method == 'DELETE':
        image_url = request.data.get('image_url')
        if not image_url:
            raise BadRequestError('Image URL is required')
        public_id = extract_public_id(image_url)
        if not public_id:
            raise BadRequestError('Invalid image URL')
        delete_image(public_id)
        return success_response({'public_id': public_id}, 'Image deleted successfully')

    upload = request.FILES.get('file')
    if upload is None:
        raise BadRequestError('No file provided')
    folder = (request.data.get('folder') or '').strip().strip('/')
    if not folder:
        raise BadRequestError('Folder path is required')
    if '..' in folder.split('/'):
        raise BadRequestError('Invalid folder path')
    _validate_image_file(upload)

    existing_image_url = request.data.get('existing_image_url')
    if existing_image_url:
        delete_image_by_url(existing_image_url)

    result = upload_image(upload, folder)
    return success_response(result, 'Image uploaded successfully')
