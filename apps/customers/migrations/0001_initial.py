import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_id', models.CharField(max_length=64, unique=True)),
                ('age', models.PositiveIntegerField()),
                ('gender', models.CharField(blank=True, default='', max_length=20)),
                ('location', models.CharField(blank=True, default='', max_length=100)),
                ('income_range', models.CharField(blank=True, default='', max_length=50)),
                ('registration_date', models.DateTimeField()),
                ('last_purchase_date', models.DateTimeField(blank=True, null=True)),
                ('total_spent', models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ('purchase_frequency', models.PositiveIntegerField(default=0)),
                ('preferred_category', models.CharField(blank=True, default='', max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'indexes': [models.Index(fields=['last_purchase_date'], name='customer_last_purchase_idx')],
            },
        ),
        migrations.CreateModel(
            name='Purchase',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_id', models.CharField(max_length=64)),
                ('product_id', models.CharField(blank=True, default='', max_length=64)),
                ('category', models.CharField(blank=True, default='', max_length=100)),
                ('amount', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('quantity', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('purchase_date', models.DateTimeField()),
                ('channel', models.CharField(choices=[('online', 'Online'), ('store', 'Store')], default='online', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['customer_id'], name='purchase_customer_idx'),
                    models.Index(fields=['-purchase_date'], name='purchase_date_desc_idx'),
                    models.Index(fields=['category'], name='purchase_category_idx'),
                ],
            },
        ),
    ]
