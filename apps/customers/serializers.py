from rest_framework import serializers
from .models import Customer, Purchase


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = '__all__'
        read_only_fields = ('created_at', 'updated_at')

    def validate_total_spent(self, value):
        if value < 0:
            raise serializers.ValidationError("total_spent cannot be negative.")
        return value


class PurchaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Purchase
        fields = '__all__'
        read_only_fields = ('created_at',)

    def validate_customer_id(self, value):
        if not Customer.objects.filter(customer_id=value).exists():
            raise serializers.ValidationError(
                f"Customer '{value}' does not exist."
            )
        return value
