from django.urls import path

from .views import SyncNowView, SyncStatusView

app_name = "sync"

urlpatterns = [
    path("now/", SyncNowView.as_view(), name="sync-now"),
    path("status/", SyncStatusView.as_view(), name="sync-status"),
]
