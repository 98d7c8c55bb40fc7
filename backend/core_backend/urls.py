"""
URL configuration for core_backend project.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def health_check(request):
    """Simple health check endpoint"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    # The 'orders' app registers its base endpoint as 'orders'.
    path("api/", include("orders.urls")),  # /api/orders/
    path("api/shifts/", include("shifts.urls")),
    path("api/sync/", include("sync.urls")),
    path("api/reports/", include("reports.urls")),
    path("api/settings/", include("settings.urls")),
]
