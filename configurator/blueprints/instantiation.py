"""
Template instantiation.

Stamps a template category (with its subcategories, products and color
variants) onto shower types as concrete catalog categories, once per selected
plumbing configuration. Each (shower type, configuration) pair is created in
its own transaction, so one failure never leaves a half-built category behind
and never blocks the other pairs.
"""
import logging
import uuid

from django.db import transaction
from django.db.models import Prefetch
from django.utils import timezone

from configurator.catalog.cloudinary_service import get_plumbing_adjusted_image
from configurator.catalog.models import ShowerType, Category, Subcategory, Product, ProductVariant
from configurator.core.cache_signals import suspend_cache_signals
from configurator.core.cache_utils import invalidate_public_lists
from configurator.core.exceptions import BadRequestError
from configurator.core.models import PlumbingConfig
from configurator.core.validators import resolve_z_index
from .models import TemplateCategory, TemplateProduct, TemplateVariant

logger = logging.getLogger(__name__)

STATUS_SUCCESS = 'success'
STATUS_ERROR = 'error'
TASK_COMPLETED = 'completed'
TASK_FAILED = 'failed'


def selected_configs(plumbing_options):
    """Plumbing configurations to build, LEFT before RIGHT"""
    configs = []
    if plumbing_options.get('create_for_left'):
        configs.append(PlumbingConfig.LEFT)
    if plumbing_options.get('create_for_right'):
        configs.append(PlumbingConfig.RIGHT)
    if not configs:
        raise BadRequestError('At least one plumbing option must be selected')
    return configs


def load_template_tree(template_id):
    """The template with everything an instance copies, in as few queries as possible"""
    variants = Prefetch('template_variants', queryset=TemplateVariant.objects.order_by('color_name'))
    products = TemplateProduct.objects.prefetch_related(variants).order_by('name')
    return TemplateCategory.objects.prefetch_related(
        'template_subcategories',
        Prefetch('template_subcategories__template_products', queryset=products),
        Prefetch(
            'template_products',
            queryset=products.filter(template_subcategory__isnull=True),
            to_attr='direct_products'
        ),
    ).filter(pk=template_id).first()


def _progress(shower_type_id, plumbing_config, status, message=None, shower_type=None, category=None):
    return {
        'shower_type_id': shower_type_id,
        'shower_type_name': shower_type.name if shower_type else None,
        'plumbing_config': plumbing_config,
        'status': status,
        'message': message,
        'category_id': category.id if category else None,
    }


def _copy_product(template_product, category, subcategory, plumbing_config, mirror_images):
    product = Product.objects.create(
        name=template_product.name,
        slug=template_product.slug,
        description=template_product.description,
        thumbnail_url=template_product.thumbnail_url,
        template=template_product,
        category=category,
        subcategory=subcategory,
        z_index=resolve_z_index(None, subcategory, category),
        plumbing_config=plumbing_config,
    )
    for template_variant in template_product.template_variants.all():
        image_url = template_variant.image_url
        if mirror_images:
            image_url = get_plumbing_adjusted_image(
                template_variant.image_url, template_variant.plumbing_config, plumbing_config
            )
        ProductVariant.objects.create(
            color_name=template_variant.color_name,
            color_code=template_variant.color_code,
            image_url=image_url,
            public_id=template_variant.public_id,
            plumbing_config=plumbing_config,
            template_variant=template_variant,
            product=product,
        )
    return product


def build_instance(template, shower_type, plumbing_config, custom_name=None, mirror_images=False):
    """Create one category instance with its full subtree. Call inside a transaction."""
    subcategories = list(template.template_subcategories.all())
    category = Category.objects.create(
        name=f"{custom_name or template.name} - {plumbing_config.lower()}",
        slug=instance_slug(template, plumbing_config),
        template=template,
        shower_type=shower_type,
        plumbing_config=plumbing_config,
        has_subcategories=bool(subcategories),
    )

    for template_subcategory in subcategories:
        subcategory = Subcategory.objects.create(
            name=template_subcategory.name,
            slug=template_subcategory.slug,
            template=template_subcategory,
            category=category,
            z_index=resolve_z_index(None, category=category),
            plumbing_config=plumbing_config,
        )
        for template_product in template_subcategory.template_products.all():
            _copy_product(template_product, category, subcategory, plumbing_config, mirror_images)

    for template_product in template.direct_products:
        _copy_product(template_product, category, None, plumbing_config, mirror_images)

    return category


def instance_slug(template, plumbing_config):
    return f"{template.slug}-{plumbing_config.lower()}"


def _instantiate_one(template, shower_type, plumbing_config, custom_name, mirror_images):
    config_label = plumbing_config.lower()

    if Category.objects.filter(
        template=template, shower_type=shower_type, plumbing_config=plumbing_config
    ).exists():
        return _progress(
            shower_type.id, plumbing_config, STATUS_ERROR,
            f"Template already instantiated for {shower_type.name} with {config_label} plumbing.",
            shower_type=shower_type
        )

    slug = instance_slug(template, plumbing_config)
    if Category.objects.filter(shower_type=shower_type, slug=slug).exists():
        return _progress(
            shower_type.id, plumbing_config, STATUS_ERROR,
            f"Category with slug '{slug}' already exists in {shower_type.name}.",
            shower_type=shower_type
        )

    try:
        with transaction.atomic():
            category = build_instance(template, shower_type, plumbing_config, custom_name, mirror_images)
    except Exception as e:
        logger.exception(
            f"Error creating instance of template {template.id} for {shower_type.name} - {plumbing_config}: {e}"
        )
        return _progress(
            shower_type.id, plumbing_config, STATUS_ERROR,
            f"Failed to create {config_label} plumbing instance",
            shower_type=shower_type
        )

    logger.info(
        f"Instantiated template {template.id} as category {category.id} "
        f"for {shower_type.name} ({config_label})"
    )
    return _progress(
        shower_type.id, plumbing_config, STATUS_SUCCESS,
        f"Created {config_label} plumbing instance for {shower_type.name}",
        shower_type=shower_type, category=category
    )


def instantiate_template(template, shower_type_ids, plumbing_options, custom_name=None):
    """
    Instantiate a loaded template (see load_template_tree) across shower types.

    Returns the task summary with one progress row per attempted instance.
    """
    configs = selected_configs(plumbing_options)
    mirror_images = bool(plumbing_options.get('mirror_images'))
    started_at = timezone.now()
    progress = []

    shower_types = ShowerType.objects.in_bulk(shower_type_ids)
    try:
        with suspend_cache_signals():
            for shower_type_id in shower_type_ids:
                shower_type = shower_types.get(shower_type_id)
                if shower_type is None:
                    progress.append(_progress(
                        shower_type_id, PlumbingConfig.LEFT, STATUS_ERROR, 'Shower type not found'
                    ))
                    continue
                for plumbing_config in configs:
                    progress.append(
                        _instantiate_one(template, shower_type, plumbing_config, custom_name, mirror_images)
                    )
    finally:
        invalidate_public_lists()

    success_count = sum(1 for row in progress if row['status'] == STATUS_SUCCESS)
    error_count = len(progress) - success_count
    return {
        'task_id': str(uuid.uuid4()),
        'template_id': template.id,
        'template_name': template.name,
        'status': TASK_FAILED if error_count and not success_count else TASK_COMPLETED,
        'started_at': started_at.isoformat(),
        'completed_at': timezone.now().isoformat(),
        'success_count': success_count,
        'error_count': error_count,
        'progress': progress,
    }
