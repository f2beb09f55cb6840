from django.urls import path
from . import views

urlpatterns = [
    path('segmentation/', views.customer_segmentation, name='customer_segmentation'),
    path('segmentation/async/', views.trigger_segmentation, name='trigger_segmentation'),
    path('prediction/', views.predict_customer_behavior, name='predict_customer_behavior'),
    path('predictions/<str:customer_id>/ltv/', views.predict_lifetime_value, name='predict_ltv'),
    path('predictions/<str:customer_id>/next-purchase/', views.predict_next_purchase, name='predict_next_purchase'),
    path('optimization/', views.optimize_campaign, name='optimize_campaign'),
    path('campaigns/<str:campaign_id>/minimize-cost/', views.minimize_campaign_cost, name='minimize_campaign_cost'),
    path('campaigns/<str:campaign_id>/maximize-conversions/', views.maximize_campaign_conversions,
         name='maximize_campaign_conversions'),
    path('dashboard/', views.analytics_dashboard, name='analytics_dashboard'),
    path('dashboard/daily-revenue/', views.daily_revenue, name='daily_revenue'),
    path('sample-data/', views.generate_sample_data, name='sample_data'),
]
