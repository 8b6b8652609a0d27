from django.urls import path
from . import views

urlpatterns = [
    path('generate/', views.GenerateGuideView.as_view(), name='guide_pipeline_generate'),
    path('health/', views.health_check, name='guide_pipeline_health'),
]
