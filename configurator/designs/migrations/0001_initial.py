import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='UserDesign',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user_full_name', models.CharField(max_length=255)),
                ('user_email', models.EmailField(db_index=True, max_length=254)),
                ('user_phone', models.CharField(max_length=30)),
                ('user_postal_code', models.CharField(max_length=20)),
                ('design_data', models.JSONField(default=dict)),
                ('shower_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='user_designs', to='catalog.showertype')),
            ],
            options={
                'db_table': 'user_designs',
                'ordering': ['-created_at'],
            },
        ),
    ]
