from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import DailySummaryViewSet

app_name = "reports"

router = DefaultRouter()
router.register(r"daily-summaries", DailySummaryViewSet, basename="daily-summary")

urlpatterns = [
    path("", include(router.urls)),
]
