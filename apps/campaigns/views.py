from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated
from .models import MarketingCampaign, CampaignPerformance
from .serializers import MarketingCampaignSerializer, CampaignPerformanceSerializer


class MarketingCampaignViewSet(mixins.ListModelMixin,
                               mixins.RetrieveModelMixin,
                               mixins.CreateModelMixin,
                               viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = MarketingCampaignSerializer
    queryset = MarketingCampaign.objects.all().order_by('-start_date')
    lookup_field = 'campaign_id'


class CampaignPerformanceViewSet(mixins.ListModelMixin,
                                 mixins.CreateModelMixin,
                                 viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = CampaignPerformanceSerializer

    def get_queryset(self):
        queryset = CampaignPerformance.objects.all().order_by('-date')
        campaign_id = self.request.query_params.get('campaign_id')
        if campaign_id:
            queryset = queryset.filter(campaign_id=campaign_id)
        return queryset
