from django.contrib import admin
from django.utils.html import format_html
from .models import ProjectType, ShowerType, Category, Subcategory, Product, ProductVariant


@admin.register(ProjectType)
class ProjectTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'created_at']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    ordering = ['name']


@admin.register(ShowerType)
class ShowerTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'project_type', 'created_at']
    list_filter = ['project_type']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    ordering = ['name']


class SubcategoryInline(admin.TabularInline):
    model = Subcategory
    extra = 0
    fields = ['name', 'slug', 'z_index', 'plumbing_config']


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'shower_type', 'plumbing_config', 'z_index', 'template', 'has_subcategories']
    list_filter = ['plumbing_config', 'shower_type', 'has_subcategories']
    search_fields = ['name', 'slug']
    ordering = ['shower_type', 'name']
    inlines = [SubcategoryInline]


@admin.register(Subcategory)
class SubcategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'category', 'plumbing_config', 'z_index']
    list_filter = ['plumbing_config']
    search_fields = ['name', 'slug', 'category__name']
    ordering = ['category', 'name']


class ProductVariantInline(admin.TabularInline):
    model = ProductVariant
    extra = 0
    fields = ['color_name', 'color_code', 'image_url', 'plumbing_config']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'category', 'subcategory', 'z_index', 'plumbing_config']
    list_filter = ['plumbing_config', 'category__shower_type']
    search_fields = ['name', 'slug', 'description']
    ordering = ['category', 'z_index', 'name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [ProductVariantInline]


@admin.register(ProductVariant)
class ProductVariantAdmin(admin.ModelAdmin):
    list_display = ['color_name', 'product', 'color_swatch', 'plumbing_config', 'created_at']
    list_filter = ['plumbing_config']
    search_fields = ['color_name', 'product__name']
    ordering = ['product', 'color_name']

    @admin.display(description='Color')
    def color_swatch(self, obj):
        if not obj.color_code:
            return '-'
        return format_html(
            '<span style="display:inline-block;width:16px;height:16px;background:{};border:1px solid #ccc"></span> {}',
            obj.color_code, obj.color_code
        )
