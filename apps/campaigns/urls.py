from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import MarketingCampaignViewSet, CampaignPerformanceViewSet

router = DefaultRouter()
router.register(r'campaigns/performance', CampaignPerformanceViewSet, basename='campaign-performance')
router.register(r'campaigns', MarketingCampaignViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
