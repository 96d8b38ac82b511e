"""
Management command to seed the starter template hierarchy
Usage: python manage.py seed_templates [--clear]
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from configurator.blueprints.models import TemplateCategory, TemplateSubcategory, TemplateProduct, TemplateVariant

STARTER_TEMPLATE = {
    'name': 'Shower Walls',
    'slug': 'shower-walls',
    'description': 'Template for shower wall categories',
    'subcategories': [
        {
            'name': 'Wall Panels',
            'slug': 'wall-panels',
            'products': [
                {
                    'name': 'Genova Wall Panel',
                    'slug': 'genova-wall-panel',
                    'variants': [
                        ('White Marble', '#FFFFFF', 'https://res.cloudinary.com/demo/image/upload/genova-white.png'),
                        ('Cream', '#F5F5DC', 'https://res.cloudinary.com/demo/image/upload/genova-cream.png'),
                    ],
                },
            ],
        },
    ],
}


class Command(BaseCommand):
    help = "Seeds the starter 'Shower Walls' template hierarchy"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete every template (categories, subcategories, products, variants) before seeding',
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            if options['clear']:
                self.stdout.write(self.style.WARNING("Clearing all existing templates..."))
                TemplateVariant.objects.all().delete()
                TemplateProduct.objects.all().delete()
                TemplateSubcategory.objects.all().delete()
                TemplateCategory.objects.all().delete()

            created = self._seed(STARTER_TEMPLATE)

        self.stdout.write(self.style.SUCCESS(f"Template '{STARTER_TEMPLATE['name']}' seeded ({created} new rows)"))

    def _seed(self, tree):
        created = 0
        template, is_new = TemplateCategory.objects.get_or_create(
            slug=tree['slug'],
            defaults={'name': tree['name'], 'description': tree['description']},
        )
        created += is_new

        for sub_data in tree['subcategories']:
            subcategory, is_new = TemplateSubcategory.objects.get_or_create(
                template_category=template,
                slug=sub_data['slug'],
                defaults={'name': sub_data['name']},
            )
            created += is_new

            for product_data in sub_data['products']:
                product, is_new = TemplateProduct.objects.get_or_create(
                    template_subcategory=subcategory,
                    slug=product_data['slug'],
                    defaults={'name': product_data['name'], 'template_category': template},
                )
                created += is_new

                for color_name, color_code, image_url in product_data['variants']:
                    _, is_new = TemplateVariant.objects.get_or_create(
                        template_product=product,
                        color_name=color_name,
                        defaults={'color_code': color_code, 'image_url': image_url},
                    )
                    created += is_new
                    if is_new:
                        self.stdout.write(f"  ✓ {product.name} / {color_name}")

        return created
