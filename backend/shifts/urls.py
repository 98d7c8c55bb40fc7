from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import ShiftViewSet

app_name = "shifts"

router = SimpleRouter()
router.register(r"", ShiftViewSet, basename="shift")

urlpatterns = [
    path("", include(router.urls)),
]
