from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from .models import Shift
from .serializers import (
    CashDrawerActivitySerializer,
    DrawerOpenSerializer,
    DrawerSummarySerializer,
    EndShiftSerializer,
    PaidInOutSerializer,
    ShiftDetailSerializer,
    ShiftSerializer,
    StartShiftSerializer,
)
from .services import ShiftService


class ShiftViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Shift history (optionally one business day with ?day=YYYY-MM-DD) plus
    the open-shift operations. Shifts are changed only through the actions
    below.
    """

    queryset = Shift.objects.all()
    filterset_fields = ["status"]

    def get_queryset(self):
        day = self.request.query_params.get("day")
        if day is None:
            return ShiftService.shift_history()
        try:
            parsed = parse_date(day)
        except ValueError:
            parsed = None
        if parsed is None:
            raise ValidationError({"day": "Use the YYYY-MM-DD format."})
        return ShiftService.shift_history(parsed)

    def get_serializer_class(self):
        if self.action == "retrieve":
            return ShiftDetailSerializer
        return ShiftSerializer

    @action(detail=False, methods=["get"])
    def current(self, request):
        """The open shift with its live drawer summary, or null."""
        shift = ShiftService.get_current_shift()
        if shift is None:
            return Response({"shift": None, "summary": None})
        return Response(
            {
                "shift": ShiftDetailSerializer(shift).data,
                "summary": DrawerSummarySerializer(ShiftService.shift_summary(shift)).data,
            }
        )

    @action(detail=False, methods=["post"])
    def start(self, request):
        params = StartShiftSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        shift = ShiftService.start_shift(params.validated_data["opening_float"])
        return Response(ShiftDetailSerializer(shift).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def end(self, request):
        params = EndShiftSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        shift = ShiftService.end_shift(
            params.validated_data["closing_cash_counted"],
            params.validated_data["cash_for_next_shift"],
        )
        return Response(ShiftDetailSerializer(shift).data)

    @action(detail=False, methods=["post"], url_path="paid-in-out")
    def paid_in_out(self, request):
        params = PaidInOutSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        activity = ShiftService.paid_in_out(
            params.validated_data["type"],
            params.validated_data["amount"],
            params.validated_data["description"],
        )
        return Response(CashDrawerActivitySerializer(activity).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="drawer-open")
    def drawer_open(self, request):
        params = DrawerOpenSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        activity = ShiftService.manual_drawer_open(params.validated_data["description"])
        return Response(CashDrawerActivitySerializer(activity).data, status=status.HTTP_201_CREATED)
