from rest_framework import serializers
from .models import MarketingCampaign, CampaignPerformance


class MarketingCampaignSerializer(serializers.ModelSerializer):
    class Meta:
        model = MarketingCampaign
        fields = '__all__'
        read_only_fields = ('created_at', 'updated_at')

    def validate(self, data):
        start_date = data.get('start_date')
        end_date = data.get('end_date')
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError(
                {'end_date': "end_date must not be before start_date."}
            )
        return data


class CampaignPerformanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = CampaignPerformance
        fields = '__all__'
        read_only_fields = ('ctr', 'cpc', 'roas', 'created_at')
