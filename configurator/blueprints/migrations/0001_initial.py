import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='TemplateCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'template_categories',
                'ordering': ['name'],
                'verbose_name_plural': 'template categories',
            },
        ),
        migrations.CreateModel(
            name='TemplateSubcategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100)),
                ('description', models.TextField(blank=True, null=True)),
                ('template_category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='template_subcategories', to='blueprints.templatecategory')),
            ],
            options={
                'db_table': 'template_subcategories',
                'ordering': ['name'],
                'verbose_name_plural': 'template subcategories',
                'constraints': [models.UniqueConstraint(fields=('template_category', 'slug'), name='unique_template_subcategory_slug')],
            },
        ),
        migrations.CreateModel(
            name='TemplateProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100)),
                ('description', models.TextField(blank=True, null=True)),
                ('thumbnail_url', models.URLField(blank=True, max_length=1000, null=True)),
                ('template_category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='template_products', to='blueprints.templatecategory')),
                ('template_subcategory', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='template_products', to='blueprints.templatesubcategory')),
            ],
            options={
                'db_table': 'template_products',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('template_subcategory__isnull', False)), fields=('template_subcategory', 'slug'), name='unique_template_product_slug_per_subcategory'),
                    models.UniqueConstraint(condition=models.Q(('template_subcategory__isnull', True)), fields=('template_category', 'slug'), name='unique_template_product_slug_per_category'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TemplateVariant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('color_name', models.CharField(max_length=100)),
                ('color_code', models.CharField(blank=True, max_length=7, null=True)),
                ('image_url', models.URLField(max_length=1000)),
                ('public_id', models.CharField(blank=True, max_length=500, null=True)),
                ('plumbing_config', models.CharField(choices=[('LEFT', 'Left'), ('RIGHT', 'Right'), ('BOTH', 'Both')], default='LEFT', max_length=10)),
                ('template_product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='template_variants', to='blueprints.templateproduct')),
            ],
            options={
                'db_table': 'template_variants',
                'ordering': ['color_name'],
                'constraints': [models.UniqueConstraint(fields=('template_product', 'color_name'), name='unique_template_variant_color')],
            },
        ),
    ]
