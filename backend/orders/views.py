from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .filters import OrderFilter
from .models import Order
from .serializers import AdvanceStatusSerializer, OrderSerializer, PlaceOrderSerializer
from .services import OrderService


class OrderViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Orders are created through POST (place order) and changed only through
    the lifecycle actions below; there is no update or delete.
    """

    queryset = Order.objects.select_related("reversal_of", "reversal").prefetch_related("items")
    serializer_class = OrderSerializer
    filterset_class = OrderFilter

    def create(self, request, *args, **kwargs):
        params = PlaceOrderSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        order = OrderService.place_order(
            cart=[dict(line) for line in data["items"]],
            payment_method=data["payment_method"],
            cash_received=data.get("cash_received"),
            discount=data.get("discount"),
            vat_enabled=data.get("vat_enabled"),
        )
        return Response(self.get_serializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def advance(self, request, pk=None):
        params = AdvanceStatusSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        order = OrderService.advance_status(pk, params.validated_data["status"])
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        order = OrderService.complete_order(pk)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        reversal = OrderService.cancel_order(pk)
        original = OrderService.get_order(pk)
        return Response(
            {
                "order": self.get_serializer(original).data,
                "reversal": self.get_serializer(reversal).data,
            },
            status=status.HTTP_200_OK,
        )
