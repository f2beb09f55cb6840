from django.urls import path
from . import views

urlpatterns = [
    path('', views.import_records, name='import_records'),
    path('templates/', views.import_templates, name='import_templates'),
    path('sample/<str:data_type>/', views.import_sample, name='import_sample'),
    path('<str:data_type>/', views.import_csv, name='import_csv'),
]
