from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import SyncRun
from .serializers import SyncRunSerializer
from .services import OrderSyncService


class SyncNowView(APIView):
    """
    Run one sync pass immediately. Returns "skipped" when a pass is already in
    flight; network failures are reported in the body, not as an HTTP error.
    """

    def post(self, request):
        result = OrderSyncService.sync_now(trigger=SyncRun.Trigger.MANUAL)
        return Response(result.as_dict(), status=status.HTTP_200_OK)


class SyncStatusView(APIView):
    def get(self, request):
        data = OrderSyncService.status()
        data["last_run"] = SyncRunSerializer(data["last_run"]).data if data["last_run"] else None
        return Response(data)
