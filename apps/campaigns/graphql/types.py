import strawberry_django
from strawberry import auto
from apps.campaigns.models import MarketingCampaign, CampaignPerformance


@strawberry_django.type(MarketingCampaign)
class MarketingCampaignType:
    id: auto
    campaign_id: auto
    name: auto
    type: auto
    target_segment: auto
    budget: auto
    start_date: auto
    end_date: auto
    status: auto


@strawberry_django.type(CampaignPerformance)
class CampaignPerformanceType:
    id: auto
    campaign_id: auto
    impressions: auto
    clicks: auto
    conversions: auto
    revenue: auto
    cost: auto
    ctr: auto
    cpc: auto
    roas: auto
    date: auto
