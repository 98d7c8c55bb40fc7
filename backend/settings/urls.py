from django.urls import path

from .views import GlobalSettingsViewSet

app_name = "settings"

global_settings = GlobalSettingsViewSet.as_view(
    {"get": "retrieve", "put": "update", "patch": "partial_update"}
)

urlpatterns = [
    path("", global_settings, name="global-settings"),
]
