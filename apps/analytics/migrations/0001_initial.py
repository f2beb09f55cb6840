import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CustomerSegment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('run_id', models.CharField(max_length=64)),
                ('segment_id', models.CharField(max_length=32)),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True, default='')),
                ('criteria', models.JSONField(default=dict)),
                ('size', models.PositiveIntegerField(default=0)),
                ('algorithm', models.CharField(default='tertile', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at', 'segment_id'],
                'indexes': [
                    models.Index(fields=['run_id'], name='segment_run_idx'),
                    models.Index(fields=['-created_at'], name='segment_created_desc_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('run_id', 'segment_id'), name='unique_segment_per_run'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PredictionResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_id', models.CharField(max_length=64)),
                ('prediction_type', models.CharField(choices=[('churn', 'Churn'), ('ltv', 'Lifetime Value'), ('next_purchase', 'Next Purchase'), ('ltv_advanced', 'Lifetime Value (advanced)'), ('next_purchase_advanced', 'Next Purchase (advanced)')], max_length=30)),
                ('probability', models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(1)])),
                ('value', models.FloatField(default=0)),
                ('confidence', models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(1)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['customer_id', 'prediction_type'], name='prediction_customer_type_idx'),
                    models.Index(fields=['-created_at'], name='prediction_created_desc_idx'),
                ],
            },
        ),
    ]
