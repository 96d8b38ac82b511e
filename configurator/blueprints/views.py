import logging

from django.db.models import Count
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from configurator.catalog.cloudinary_service import delete_image_by_url
from configurator.core.exceptions import BadRequestError, NotFoundError
from configurator.core.filters import apply_filters
from configurator.core.permissions import IsAdmin, IsAdminOrReadOnly
from configurator.core.responses import paginate_queryset, paginated_response, success_response
from configurator.core.utils import (
    ensure_unique, get_object_or_error, get_related_or_error, request_value, validate_request
)
from .filters import TemplateCategoryFilter, TemplateSubcategoryFilter, TemplateProductFilter, TemplateVariantFilter
from .instantiation import instantiate_template, load_template_tree, selected_configs
from .models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant
from .serializers import (
    TemplateCategorySerializer, TemplateCategoryDetailSerializer,
    TemplateSubcategorySerializer, TemplateSubcategoryDetailSerializer,
    TemplateProductSerializer, TemplateVariantSerializer,
    InstantiateTemplateSerializer
)

logger = logging.getLogger(__name__)


# Template category views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def template_category_list_create(request):
    """List templates or create one"""
    if request.method == 'GET':
        queryset = TemplateCategory.objects.annotate(
            num_subcategories=Count('template_subcategories', distinct=True),
            num_products=Count('template_products', distinct=True),
            num_instances=Count('categories', distinct=True),
        ).order_by('name')
        queryset = apply_filters(TemplateCategoryFilter, request.query_params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, request.query_params)
        return paginated_response(TemplateCategorySerializer(rows, many=True).data, page, limit, total)

    serializer = validate_request(TemplateCategorySerializer, request)
    ensure_unique(
        TemplateCategory.objects.filter(slug=serializer.validated_data['slug']),
        'Template with this slug already exists'
    )
    template = serializer.save()
    logger.info(f"Created template {template.id} ({template.slug})")
    return success_response(
        TemplateCategorySerializer(template).data,
        'Template created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def template_category_detail(request, pk):
    """Retrieve, update or delete a template"""
    template = get_object_or_error(TemplateCategory.objects.all(), pk, 'Template')

    if request.method == 'GET':
        return success_response(TemplateCategoryDetailSerializer(template).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(TemplateCategorySerializer, request, template)
        if 'slug' in serializer.validated_data:
            ensure_unique(
                TemplateCategory.objects.filter(slug=serializer.validated_data['slug']),
                'Template with this slug already exists',
                exclude_pk=template.pk
            )
        template = serializer.save()
        return success_response(TemplateCategorySerializer(template).data, 'Template updated successfully')

    if (template.template_subcategories.exists() or template.template_products.exists()
            or template.categories.exists()):
        raise BadRequestError(
            'Cannot delete template that has subcategories, products or instantiated categories. '
            'Please remove them first.'
        )
    template_id = template.id
    template.delete()
    logger.info(f"Deleted template {template_id}")
    return success_response({'id': template_id}, 'Template deleted successfully')


# Template subcategory views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def template_subcategory_list_create(request):
    """List template subcategories or create one"""
    if request.method == 'GET':
        queryset = TemplateSubcategory.objects.select_related('template_category').annotate(
            num_template_products=Count('template_products', distinct=True),
            num_instances=Count('subcategories', distinct=True),
        ).order_by('name')
        queryset = apply_filters(TemplateSubcategoryFilter, request.query_params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, request.query_params)
        return paginated_response(TemplateSubcategorySerializer(rows, many=True).data, page, limit, total)

    serializer = validate_request(TemplateSubcategorySerializer, request)
    data = serializer.validated_data
    template = get_related_or_error(TemplateCategory, data['template_category_id'], 'Template category')
    ensure_unique(
        TemplateSubcategory.objects.filter(template_category=template, slug=data['slug']),
        'Template subcategory with this slug already exists in this template'
    )
    subcategory = serializer.save()
    logger.info(f"Created template subcategory {subcategory.id} ({subcategory.slug}) in template {template.id}")
    return success_response(
        TemplateSubcategorySerializer(subcategory).data,
        'Template subcategory created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def template_subcategory_detail(request, pk):
    """Retrieve, update or delete a template subcategory"""
    subcategory = get_object_or_error(
        TemplateSubcategory.objects.select_related('template_category'), pk, 'Template subcategory'
    )

    if request.method == 'GET':
        return success_response(TemplateSubcategoryDetailSerializer(subcategory).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(TemplateSubcategorySerializer, request, subcategory)
        data = serializer.validated_data
        if 'template_category_id' in data:
            get_related_or_error(TemplateCategory, data['template_category_id'], 'Template category')
        if 'slug' in data or 'template_category_id' in data:
            ensure_unique(
                TemplateSubcategory.objects.filter(
                    template_category_id=request_value(data, subcategory, 'template_category_id'),
                    slug=request_value(data, subcategory, 'slug'),
                ),
                'Template subcategory with this slug already exists in this template',
                exclude_pk=subcategory.pk
            )
        subcategory = serializer.save()
        return success_response(
            TemplateSubcategorySerializer(subcategory).data, 'Template subcategory updated successfully'
        )

    if subcategory.template_products.exists() or subcategory.subcategories.exists():
        raise BadRequestError(
            'Cannot delete template subcategory that has products or instantiated subcategories. '
            'Please remove them first.'
        )
    subcategory_id = subcategory.id
    subcategory.delete()
    logger.info(f"Deleted template subcategory {subcategory_id}")
    return success_response({'id': subcategory_id}, 'Template subcategory deleted successfully')


# Template product views
def _resolve_template_product_parents(category_id, subcategory_id):
    """
    A template product hangs off a template subcategory, or directly off a
    template. A subcategory implies its template.
    """
    if not category_id and not subcategory_id:
        raise BadRequestError('Either template_category_id or template_subcategory_id is required')
    template = get_related_or_error(TemplateCategory, category_id, 'Template category')
    subcategory = get_related_or_error(TemplateSubcategory, subcategory_id, 'Template subcategory')
    if subcategory is not None:
        if template is not None and subcategory.template_category_id != template.id:
            raise NotFoundError('Template subcategory in this template')
        template = subcategory.template_category
    return template, subcategory


def _template_product_scope(template_id, subcategory_id):
    if subcategory_id:
        return TemplateProduct.objects.filter(template_subcategory_id=subcategory_id)
    return TemplateProduct.objects.filter(template_category_id=template_id, template_subcategory__isnull=True)


@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def template_product_list_create(request):
    """List template products (unpaginated) or create one"""
    if request.method == 'GET':
        queryset = TemplateProduct.objects.select_related(
            'template_category', 'template_subcategory'
        ).prefetch_related('template_variants').annotate(
            num_instances=Count('products', distinct=True)
        ).order_by('name')
        queryset = apply_filters(TemplateProductFilter, request.query_params, queryset)
        return success_response(TemplateProductSerializer(queryset, many=True).data)

    serializer = validate_request(TemplateProductSerializer, request)
    data = serializer.validated_data
    template, subcategory = _resolve_template_product_parents(
        data.get('template_category_id'), data.get('template_subcategory_id')
    )
    ensure_unique(
        _template_product_scope(template.id, subcategory.id if subcategory else None).filter(slug=data['slug']),
        'Template product with this slug already exists'
    )
    product = serializer.save(template_category_id=template.id)
    logger.info(f"Created template product {product.id} ({product.slug}) in template {template.id}")
    return success_response(
        TemplateProductSerializer(product).data,
        'Template product created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def template_product_detail(request, pk):
    """Retrieve, update or delete a template product"""
    product = get_object_or_error(
        TemplateProduct.objects.select_related('template_category', 'template_subcategory'),
        pk, 'Template product'
    )

    if request.method == 'GET':
        return success_response(TemplateProductSerializer(product).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(TemplateProductSerializer, request, product)
        data = serializer.validated_data
        if 'template_category_id' in data:
            category_id = data['template_category_id']
        elif data.get('template_subcategory_id'):
            # Moving to another subcategory carries the product to its template
            category_id = None
        else:
            category_id = product.template_category_id
        template, subcategory = _resolve_template_product_parents(
            category_id,
            request_value(data, product, 'template_subcategory_id'),
        )
        if {'slug', 'template_category_id', 'template_subcategory_id'} & set(data):
            ensure_unique(
                _template_product_scope(
                    template.id, subcategory.id if subcategory else None
                ).filter(slug=request_value(data, product, 'slug')),
                'Template product with this slug already exists',
                exclude_pk=product.pk
            )
        old_thumbnail = product.thumbnail_url
        product = serializer.save(template_category_id=template.id)
        if old_thumbnail and old_thumbnail != product.thumbnail_url:
            delete_image_by_url(old_thumbnail)
        return success_response(TemplateProductSerializer(product).data, 'Template product updated successfully')

    if product.template_variants.exists() or product.products.exists():
        raise BadRequestError(
            'Cannot delete template product that has variants or product instances. Please remove them first.'
        )
    product_id = product.id
    thumbnail_url = product.thumbnail_url
    product.delete()
    delete_image_by_url(thumbnail_url)
    logger.info(f"Deleted template product {product_id}")
    return success_response({'id': product_id}, 'Template product deleted successfully')


# Template variant views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def template_variant_list_create(request):
    """List template variants or create one"""
    if request.method == 'GET':
        queryset = TemplateVariant.objects.annotate(
            num_product_variants=Count('product_variants')
        ).order_by('color_name')
        queryset = apply_filters(TemplateVariantFilter, request.query_params, queryset)
        rows, page, limit, total = paginate_queryset(queryset, request.query_params)
        return paginated_response(TemplateVariantSerializer(rows, many=True).data, page, limit, total)

    serializer = validate_request(TemplateVariantSerializer, request)
    data = serializer.validated_data
    product = get_related_or_error(TemplateProduct, data['template_product_id'], 'Template product')
    ensure_unique(
        TemplateVariant.objects.filter(template_product=product, color_name=data['color_name']),
        'Template variant with this color name already exists in this product'
    )
    variant = serializer.save()
    logger.info(f"Created template variant {variant.id} ({variant.color_name}) for template product {product.id}")
    return success_response(
        TemplateVariantSerializer(variant).data,
        'Template variant created successfully',
        status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def template_variant_detail(request, pk):
    """Retrieve, update or delete a template variant"""
    variant = get_object_or_error(TemplateVariant.objects.all(), pk, 'Template variant')

    if request.method == 'GET':
        return success_response(TemplateVariantSerializer(variant).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = validate_request(TemplateVariantSerializer, request, variant)
        data = serializer.validated_data
        if 'template_product_id' in data:
            get_related_or_error(TemplateProduct, data['template_product_id'], 'Template product')
        if 'color_name' in data or 'template_product_id' in data:
            ensure_unique(
                TemplateVariant.objects.filter(
                    template_product_id=request_value(data, variant, 'template_product_id'),
                    color_name=request_value(data, variant, 'color_name'),
                ),
                'Template variant with this color name already exists in this product',
                exclude_pk=variant.pk
            )
        old_image_url, old_public_id = variant.image_url, variant.public_id
        variant = serializer.save()
        if old_image_url and old_image_url != variant.image_url:
            delete_image_by_url(old_image_url, old_public_id)
        return success_response(TemplateVariantSerializer(variant).data, 'Template variant updated successfully')

    variant_id = variant.id
    image_url, public_id = variant.image_url, variant.public_id
    variant.delete()
    delete_image_by_url(image_url, public_id)
    logger.info(f"Deleted template variant {variant_id}")
    return success_response({'id': variant_id}, 'Template variant deleted successfully')


# Instantiation
@api_view(['POST'])
@permission_classes([IsAdmin])
def template_instantiate(request):
    """Stamp a template onto shower types for the selected plumbing configurations"""
    serializer = InstantiateTemplateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    selected_configs(data['plumbing_options'])
    template = load_template_tree(data['template_category_id'])
    if template is None:
        raise NotFoundError('Template')

    task = instantiate_template(
        template,
        data['shower_type_ids'],
        data['plumbing_options'],
        custom_name=data.get('custom_name'),
    )
    logger.info(
        f"Template {template.id} instantiation finished: "
        f"{task['success_count']} created, {task['error_count']} failed"
    )
    return success_response(task, 'Template instantiation completed')
