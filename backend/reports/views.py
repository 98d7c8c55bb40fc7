from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .filters import DailySummaryFilter
from .models import DailySummary
from .serializers import DailySummarySerializer, RebuildDailySummarySerializer
from .services import DailySummaryService


class DailySummaryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Daily sales rollups. Filter with ?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD.
    """

    queryset = DailySummary.objects.all()
    serializer_class = DailySummarySerializer
    filterset_class = DailySummaryFilter

    @action(detail=False, methods=["post"])
    def rebuild(self, request):
        """Recompute summaries from the orders table for a date or date range."""
        params = RebuildDailySummarySerializer(data=request.data)
        params.is_valid(raise_exception=True)
        summaries = DailySummaryService.rebuild_range(
            params.validated_data["start_date"], params.validated_data["end_date"]
        )
        return Response(DailySummarySerializer(summaries, many=True).data, status=status.HTTP_200_OK)
