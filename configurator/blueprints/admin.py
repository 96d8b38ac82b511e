from django.contrib import admin
from .models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant


class TemplateSubcategoryInline(admin.TabularInline):
    model = TemplateSubcategory
    extra = 0
    fields = ['name', 'slug', 'description']


@admin.register(TemplateCategory)
class TemplateCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'slug', 'description']
    prepopulated_fields = {'slug': ('name',)}
    ordering = ['name']
    inlines = [TemplateSubcategoryInline]


@admin.register(TemplateSubcategory)
class TemplateSubcategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'template_category', 'created_at']
    list_filter = ['template_category']
    search_fields = ['name', 'slug']
    ordering = ['template_category', 'name']


class TemplateVariantInline(admin.TabularInline):
    model = TemplateVariant
    extra = 0
    fields = ['color_name', 'color_code', 'image_url', 'plumbing_config']


@admin.register(TemplateProduct)
class TemplateProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'template_category', 'template_subcategory', 'created_at']
    list_filter = ['template_category']
    search_fields = ['name', 'slug', 'description']
    ordering = ['name']
    inlines = [TemplateVariantInline]


@admin.register(TemplateVariant)
class TemplateVariantAdmin(admin.ModelAdmin):
    list_display = ['color_name', 'color_code', 'template_product', 'plumbing_config', 'created_at']
    list_filter = ['plumbing_config']
    search_fields = ['color_name', 'template_product__name']
    ordering = ['template_product', 'color_name']
