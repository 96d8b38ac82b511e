from django.db import models
from django.db.models import Q

from configurator.core.models import PlumbingConfig, TimestampedModel


class TemplateCategory(TimestampedModel):
    """Reusable category pattern that can be stamped onto many shower types"""
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'template_categories'
        ordering = ['name']
        verbose_name_plural = 'template categories'


class TemplateSubcategory(TimestampedModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100)
    description = models.TextField(blank=True, null=True)
    template_category = models.ForeignKey(
        TemplateCategory, on_delete=models.PROTECT, related_name='template_subcategories'
    )

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'template_subcategories'
        ordering = ['name']
        verbose_name_plural = 'template subcategories'
        constraints = [
            models.UniqueConstraint(
                fields=['template_category', 'slug'], name='unique_template_subcategory_slug'
            ),
        ]


class TemplateProduct(TimestampedModel):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100)
    description = models.TextField(blank=True, null=True)
    thumbnail_url = models.URLField(max_length=1000, blank=True, null=True)
    template_category = models.ForeignKey(
        TemplateCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='template_products'
    )
    template_subcategory = models.ForeignKey(
        TemplateSubcategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='template_products'
    )

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'template_products'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['template_subcategory', 'slug'], condition=Q(template_subcategory__isnull=False),
                name='unique_template_product_slug_per_subcategory'
            ),
            models.UniqueConstraint(
                fields=['template_category', 'slug'], condition=Q(template_subcategory__isnull=True),
                name='unique_template_product_slug_per_category'
            ),
        ]


class TemplateVariant(TimestampedModel):
    color_name = models.CharField(max_length=100)
    color_code = models.CharField(max_length=7, blank=True, null=True)
    image_url = models.URLField(max_length=1000)
    public_id = models.CharField(max_length=500, blank=True, null=True)
    template_product = models.ForeignKey(
        TemplateProduct, on_delete=models.PROTECT, related_name='template_variants'
    )
    plumbing_config = models.CharField(max_length=10, choices=PlumbingConfig.choices, default=PlumbingConfig.LEFT)

    def __str__(self):
        return f"{self.template_product.name} - {self.color_name}"

    class Meta:
        db_table = 'template_variants'
        ordering = ['color_name']
        constraints = [
            models.UniqueConstraint(
                fields=['template_product', 'color_name'], name='unique_template_variant_color'
            ),
        ]
