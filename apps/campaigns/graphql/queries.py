import strawberry
from typing import List, Optional
from apps.campaigns.models import MarketingCampaign, CampaignPerformance
from core.graphql.permissions import IsAuthenticated
from .types import MarketingCampaignType, CampaignPerformanceType


@strawberry.type
class CampaignQueries:

    @strawberry.field(permission_classes=[IsAuthenticated])
    def campaigns(self, status: Optional[str] = None) -> List[MarketingCampaignType]:
        queryset = MarketingCampaign.objects.order_by('-start_date')
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    @strawberry.field(permission_classes=[IsAuthenticated])
    def campaign(self, campaign_id: str) -> Optional[MarketingCampaignType]:
        return MarketingCampaign.objects.filter(campaign_id=campaign_id).first()

    @strawberry.field(permission_classes=[IsAuthenticated])
    def campaign_performance(self, campaign_id: str) -> List[CampaignPerformanceType]:
        return CampaignPerformance.objects.filter(campaign_id=campaign_id).order_by('date')
