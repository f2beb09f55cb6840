from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


class CustomerSegment(models.Model):
    class Meta:
        app_label = 'analytics'
        ordering = ['-created_at', 'segment_id']
        indexes = [
            models.Index(fields=['run_id'], name='segment_run_idx'),
            models.Index(fields=['-created_at'], name='segment_created_desc_idx'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['run_id', 'segment_id'], name='unique_segment_per_run'),
        ]

    run_id = models.CharField(max_length=64)
    segment_id = models.CharField(max_length=32)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default='')
    criteria = models.JSONField(default=dict)
    size = models.PositiveIntegerField(default=0)
    algorithm = models.CharField(max_length=50, default='tertile')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.run_id})"


class PredictionResult(models.Model):
    class Meta:
        app_label = 'analytics'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['customer_id', 'prediction_type'], name='prediction_customer_type_idx'),
            models.Index(fields=['-created_at'], name='prediction_created_desc_idx'),
        ]

    TYPE_CHOICES = [
        ('churn', 'Churn'),
        ('ltv', 'Lifetime Value'),
        ('next_purchase', 'Next Purchase'),
        ('ltv_advanced', 'Lifetime Value (advanced)'),
        ('next_purchase_advanced', 'Next Purchase (advanced)'),
    ]

    customer_id = models.CharField(max_length=64)
    prediction_type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    probability = models.FloatField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(1)]
    )
    value = models.FloatField(default=0)
    confidence = models.FloatField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(1)]
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.prediction_type} for {self.customer_id}"
