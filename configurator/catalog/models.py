from django.db import models
from django.db.models import Q

from configurator.core.models import DEFAULT_Z_INDEX, PlumbingConfig, TimestampedModel


class ProjectType(TimestampedModel):
    """Top level of the catalog (e.g. bath remodel, shower conversion)"""
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    image_url = models.URLField(max_length=1000, blank=True, null=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'project_types'
        ordering = ['name']


class ShowerType(TimestampedModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    project_type = models.ForeignKey(ProjectType, on_delete=models.PROTECT, related_name='shower_types')
    image_url = models.URLField(max_length=1000, blank=True, null=True)
    base_image_left = models.URLField(max_length=1000, blank=True, null=True)
    base_image_right = models.URLField(max_length=1000, blank=True, null=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'shower_types'
        ordering = ['name']


class Category(TimestampedModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100)
    has_subcategories = models.BooleanField(default=False)
    shower_type = models.ForeignKey(ShowerType, on_delete=models.PROTECT, related_name='categories')
    template = models.ForeignKey(
        'blueprints.TemplateCategory', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='categories'
    )
    z_index = models.IntegerField(default=DEFAULT_Z_INDEX, null=True, blank=True)
    plumbing_config = models.CharField(max_length=10, choices=PlumbingConfig.choices, default=PlumbingConfig.LEFT)

    def __str__(self):
        return f"{self.name} ({self.shower_type.name})"

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        verbose_name_plural = 'categories'
        constraints = [
            models.UniqueConstraint(fields=['shower_type', 'slug'], name='unique_category_slug_per_shower_type'),
        ]
        indexes = [
            models.Index(fields=['template', 'shower_type', 'plumbing_config'], name='category_template_lookup_idx'),
        ]


class Subcategory(TimestampedModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='subcategories')
    template = models.ForeignKey(
        'blueprints.TemplateSubcategory', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='subcategories'
    )
    z_index = models.IntegerField(default=DEFAULT_Z_INDEX, null=True, blank=True)
    plumbing_config = models.CharField(max_length=10, choices=PlumbingConfig.choices, default=PlumbingConfig.LEFT)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'subcategories'
        ordering = ['name']
        verbose_name_plural = 'subcategories'
        constraints = [
            models.UniqueConstraint(fields=['category', 'slug'], name='unique_subcategory_slug_per_category'),
        ]


class Product(TimestampedModel):
    """
    A selectable product. Slugs are unique within the subcategory when the
    product sits in one, otherwise within the category.
    """
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100)
    description = models.TextField(blank=True, null=True)
    thumbnail_url = models.URLField(max_length=1000, blank=True, null=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    subcategory = models.ForeignKey(
        Subcategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='products'
    )
    template = models.ForeignKey(
        'blueprints.TemplateProduct', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='products'
    )
    z_index = models.IntegerField(default=DEFAULT_Z_INDEX, null=True, blank=True)
    plumbing_config = models.CharField(max_length=10, choices=PlumbingConfig.choices, default=PlumbingConfig.LEFT)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'products'
        ordering = ['z_index', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'slug'], condition=Q(subcategory__isnull=True),
                name='unique_product_slug_per_category'
            ),
            models.UniqueConstraint(
                fields=['subcategory', 'slug'], condition=Q(subcategory__isnull=False),
                name='unique_product_slug_per_subcategory'
            ),
        ]


class ProductVariant(TimestampedModel):
    """A color option of a product with its layer image"""
    color_name = models.CharField(max_length=100)
    color_code = models.CharField(max_length=7, blank=True, null=True)
    image_url = models.URLField(max_length=1000)
    public_id = models.CharField(max_length=500, blank=True, null=True)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='variants')
    template_variant = models.ForeignKey(
        'blueprints.TemplateVariant', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='product_variants'
    )
    plumbing_config = models.CharField(max_length=10, choices=PlumbingConfig.choices, blank=True, null=True)

    def __str__(self):
        return f"{self.product.name} - {self.color_name}"

    class Meta:
        db_table = 'product_variants'
        ordering = ['color_name']
        constraints = [
            models.UniqueConstraint(fields=['product', 'color_name'], name='unique_variant_color_per_product'),
        ]
