from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator


class MarketingCampaign(models.Model):
    class Meta:
        app_label = 'campaigns'
        indexes = [
            models.Index(fields=['status'], name='campaign_status_idx'),
            models.Index(fields=['-start_date'], name='campaign_start_desc_idx'),
        ]

    TYPE_CHOICES = [
        ('email', 'Email'),
        ('social', 'Social'),
        ('display', 'Display'),
        ('search', 'Search'),
        ('influencer', 'Influencer'),
    ]

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('paused', 'Paused'),
        ('completed', 'Completed'),
    ]

    campaign_id = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    target_segment = models.CharField(max_length=100, blank=True, default='')
    budget = models.FloatField(validators=[MinValueValidator(0)])
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def clean(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("start_date must not be after end_date")

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)


def derive_performance_metrics(impressions, clicks, cost, revenue):
    """CTR (percent), CPC and ROAS for one performance row; 0 when the divisor is 0."""
    ctr = clicks / impressions * 100 if impressions > 0 else 0.0
    cpc = cost / clicks if clicks > 0 else 0.0
    roas = revenue / cost if cost > 0 else 0.0
    return ctr, cpc, roas


class CampaignPerformance(models.Model):
    class Meta:
        app_label = 'campaigns'
        indexes = [
            models.Index(fields=['campaign_id'], name='performance_campaign_idx'),
            models.Index(fields=['-date'], name='performance_date_desc_idx'),
        ]

    campaign_id = models.CharField(max_length=64)
    impressions = models.PositiveIntegerField(default=0)
    clicks = models.PositiveIntegerField(default=0)
    conversions = models.PositiveIntegerField(default=0)
    revenue = models.FloatField(default=0, validators=[MinValueValidator(0)])
    cost = models.FloatField(default=0, validators=[MinValueValidator(0)])

    # Derived at creation time and stored; never recomputed afterwards
    ctr = models.FloatField(default=0)
    cpc = models.FloatField(default=0)
    roas = models.FloatField(default=0)

    date = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.ctr, self.cpc, self.roas = derive_performance_metrics(
                self.impressions, self.clicks, self.cost, self.revenue
            )
        super().save(*args, **kwargs)
