from rest_framework import mixins, viewsets
from rest_framework.response import Response

from .serializers import GlobalSettingsSerializer
from .services import SettingsService


class GlobalSettingsViewSet(
    mixins.RetrieveModelMixin, mixins.UpdateModelMixin, viewsets.GenericViewSet
):
    """
    API endpoint for viewing and editing the single GlobalSettings object.
    """

    serializer_class = GlobalSettingsSerializer

    def get_object(self):
        """
        Always returns the single GlobalSettings instance.
        """
        return SettingsService.get_global_settings()

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        instance = SettingsService.update_global_settings(serializer.validated_data)
        return Response(self.get_serializer(instance).data)
