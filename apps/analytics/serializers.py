from datetime import datetime, time

from django.utils import timezone
from rest_framework import serializers
from .models import CustomerSegment, PredictionResult
from .options import DateRange, SampleDataOptions, SegmentationOptions

OPTIMIZATION_PARAMETERS = {
    'budget_reduction_rate': float,
    'roas_priority_threshold': float,
    'conversions_priority_threshold': int,
}


class CustomerSegmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomerSegment
        fields = ('id', 'run_id', 'segment_id', 'name', 'description', 'criteria',
                  'size', 'algorithm', 'created_at', 'updated_at')
        read_only_fields = fields


class PredictionResultSerializer(serializers.ModelSerializer):
    class Meta:
        model = PredictionResult
        fields = ('id', 'customer_id', 'prediction_type', 'probability', 'value',
                  'confidence', 'created_at')
        read_only_fields = fields


class SegmentationRequestSerializer(serializers.Serializer):
    algorithm = serializers.CharField(max_length=50, default='tertile')
    features = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    parameters = serializers.DictField(required=False)

    def to_options(self, limit):
        data = self.validated_data
        features = tuple(data.get('features') or SegmentationOptions.features)
        return SegmentationOptions(algorithm=data['algorithm'], features=features, limit=limit)


class PredictionRequestSerializer(serializers.Serializer):
    customer_id = serializers.CharField(max_length=64)
    # Checked against the supported types by the service, which answers 400 itself
    prediction_type = serializers.CharField(max_length=30)


class OptimizationRequestSerializer(serializers.Serializer):
    campaign_id = serializers.CharField(max_length=64)
    objective = serializers.CharField(max_length=30)
    parameters = serializers.DictField(required=False)

    def validate_parameters(self, value):
        """Keep the tunable thresholds; other keys are accepted and ignored."""
        cleaned = {}
        for key, cast in OPTIMIZATION_PARAMETERS.items():
            if key not in value:
                continue
            try:
                cleaned[key] = cast(value[key])
            except (TypeError, ValueError):
                raise serializers.ValidationError({key: f"{key} must be a number."})
            if cleaned[key] < 0:
                raise serializers.ValidationError({key: f"{key} must not be negative."})
        return cleaned


class DateRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, data):
        start_date = data.get('start_date')
        end_date = data.get('end_date')
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError(
                {'end_date': "end_date must not be before start_date."}
            )
        return data

    def to_date_range(self):
        """Whole days: start at midnight, end at the last instant of end_date."""
        start_date = self.validated_data.get('start_date')
        end_date = self.validated_data.get('end_date')
        return DateRange(
            start_date=timezone.make_aware(datetime.combine(start_date, time.min)) if start_date else None,
            end_date=timezone.make_aware(datetime.combine(end_date, time.max)) if end_date else None,
        )


class SampleDataRequestSerializer(serializers.Serializer):
    customers = serializers.IntegerField(min_value=0, max_value=1000, default=50)
    purchases = serializers.IntegerField(min_value=0, max_value=5000, default=200)
    campaigns = serializers.IntegerField(min_value=0, max_value=100, default=10)
    seed = serializers.IntegerField(required=False, allow_null=True)

    def to_options(self):
        return SampleDataOptions(**self.validated_data)
