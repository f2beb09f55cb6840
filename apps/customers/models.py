from django.db import models
from django.core.validators import MinValueValidator


class Customer(models.Model):
    class Meta:
        app_label = 'customers'
        indexes = [
            models.Index(fields=['last_purchase_date'], name='customer_last_purchase_idx'),
        ]

    customer_id = models.CharField(max_length=64, unique=True)
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=20, blank=True, default='')
    location = models.CharField(max_length=100, blank=True, default='')
    income_range = models.CharField(max_length=50, blank=True, default='')
    registration_date = models.DateTimeField()
    last_purchase_date = models.DateTimeField(null=True, blank=True)

    # Denormalized rollups of the purchase ledger, refreshed in the background
    total_spent = models.FloatField(default=0, validators=[MinValueValidator(0)])
    purchase_frequency = models.PositiveIntegerField(default=0)

    preferred_category = models.CharField(max_length=100, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.customer_id


class Purchase(models.Model):
    class Meta:
        app_label = 'customers'
        indexes = [
            models.Index(fields=['customer_id'], name='purchase_customer_idx'),
            models.Index(fields=['-purchase_date'], name='purchase_date_desc_idx'),
            models.Index(fields=['category'], name='purchase_category_idx'),
        ]

    CHANNEL_CHOICES = [
        ('online', 'Online'),
        ('store', 'Store'),
    ]

    customer_id = models.CharField(max_length=64)
    product_id = models.CharField(max_length=64, blank=True, default='')
    category = models.CharField(max_length=100, blank=True, default='')
    amount = models.FloatField(validators=[MinValueValidator(0)])
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    purchase_date = models.DateTimeField()
    channel = models.CharField(max_length=20, choices=CHANNEL_CHOICES, default='online')
    created_at = models.DateTimeField(auto_now_add=True)

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Purchases are immutable once recorded")
        super().save(*args, **kwargs)
