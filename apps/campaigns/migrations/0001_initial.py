import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='MarketingCampaign',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('campaign_id', models.CharField(max_length=64, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('type', models.CharField(choices=[('email', 'Email'), ('social', 'Social'), ('display', 'Display'), ('search', 'Search'), ('influencer', 'Influencer')], max_length=20)),
                ('target_segment', models.CharField(blank=True, default='', max_length=100)),
                ('budget', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('status', models.CharField(choices=[('active', 'Active'), ('paused', 'Paused'), ('completed', 'Completed')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['status'], name='campaign_status_idx'),
                    models.Index(fields=['-start_date'], name='campaign_start_desc_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CampaignPerformance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('campaign_id', models.CharField(max_length=64)),
                ('impressions', models.PositiveIntegerField(default=0)),
                ('clicks', models.PositiveIntegerField(default=0)),
                ('conversions', models.PositiveIntegerField(default=0)),
                ('revenue', models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ('cost', models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ('ctr', models.FloatField(default=0)),
                ('cpc', models.FloatField(default=0)),
                ('roas', models.FloatField(default=0)),
                ('date', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['campaign_id'], name='performance_campaign_idx'),
                    models.Index(fields=['-date'], name='performance_date_desc_idx'),
                ],
            },
        ),
    ]
