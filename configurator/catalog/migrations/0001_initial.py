import django.db.models.deletion
from django.db import migrations, models


PLUMBING_CHOICES = [('LEFT', 'Left'), ('RIGHT', 'Right'), ('BOTH', 'Both')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('blueprints', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ProjectType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('image_url', models.URLField(blank=True, max_length=1000, null=True)),
            ],
            options={
                'db_table': 'project_types',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ShowerType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('image_url', models.URLField(blank=True, max_length=1000, null=True)),
                ('base_image_left', models.URLField(blank=True, max_length=1000, null=True)),
                ('base_image_right', models.URLField(blank=True, max_length=1000, null=True)),
                ('project_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shower_types', to='catalog.projecttype')),
            ],
            options={
                'db_table': 'shower_types',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100)),
                ('has_subcategories', models.BooleanField(default=False)),
                ('z_index', models.IntegerField(blank=True, default=50, null=True)),
                ('plumbing_config', models.CharField(choices=PLUMBING_CHOICES, default='LEFT', max_length=10)),
                ('shower_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='categories', to='catalog.showertype')),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='categories', to='blueprints.templatecategory')),
            ],
            options={
                'db_table': 'categories',
                'ordering': ['name'],
                'verbose_name_plural': 'categories',
                'indexes': [models.Index(fields=['template', 'shower_type', 'plumbing_config'], name='category_template_lookup_idx')],
                'constraints': [models.UniqueConstraint(fields=('shower_type', 'slug'), name='unique_category_slug_per_shower_type')],
            },
        ),
        migrations.CreateModel(
            name='Subcategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100)),
                ('z_index', models.IntegerField(blank=True, default=50, null=True)),
                ('plumbing_config', models.CharField(choices=PLUMBING_CHOICES, default='LEFT', max_length=10)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='subcategories', to='catalog.category')),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='subcategories', to='blueprints.templatesubcategory')),
            ],
            options={
                'db_table': 'subcategories',
                'ordering': ['name'],
                'verbose_name_plural': 'subcategories',
                'constraints': [models.UniqueConstraint(fields=('category', 'slug'), name='unique_subcategory_slug_per_category')],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100)),
                ('description', models.TextField(blank=True, null=True)),
                ('thumbnail_url', models.URLField(blank=True, max_length=1000, null=True)),
                ('z_index', models.IntegerField(blank=True, default=50, null=True)),
                ('plumbing_config', models.CharField(choices=PLUMBING_CHOICES, default='LEFT', max_length=10)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='products', to='catalog.category')),
                ('subcategory', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='products', to='catalog.subcategory')),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='products', to='blueprints.templateproduct')),
            ],
            options={
                'db_table': 'products',
                'ordering': ['z_index', 'name'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('subcategory__isnull', True)), fields=('category', 'slug'), name='unique_product_slug_per_category'),
                    models.UniqueConstraint(condition=models.Q(('subcategory__isnull', False)), fields=('subcategory', 'slug'), name='unique_product_slug_per_subcategory'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProductVariant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('color_name', models.CharField(max_length=100)),
                ('color_code', models.CharField(blank=True, max_length=7, null=True)),
                ('image_url', models.URLField(max_length=1000)),
                ('public_id', models.CharField(blank=True, max_length=500, null=True)),
                ('plumbing_config', models.CharField(blank=True, choices=PLUMBING_CHOICES, max_length=10, null=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='variants', to='catalog.product')),
                ('template_variant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='product_variants', to='blueprints.templatevariant')),
            ],
            options={
                'db_table': 'product_variants',
                'ordering': ['color_name'],
                'constraints': [models.UniqueConstraint(fields=('product', 'color_name'), name='unique_variant_color_per_product')],
            },
        ),
    ]
