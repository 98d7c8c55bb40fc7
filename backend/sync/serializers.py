"""
Wire format for the remote ledger.

Orders are sent with camelCase keys and numbers (not strings) for money, the
shape the remote ledger's logBatchData action expects.
"""
from rest_framework import serializers

from core_backend.utils.money import HUNDRED
from orders.models import Order, OrderItem
from .models import SyncRun


def _money(source=None):
    kwargs = {"max_digits": 14, "decimal_places": 2, "coerce_to_string": False, "read_only": True}
    if source:
        kwargs["source"] = source
    return serializers.DecimalField(**kwargs)


class SyncOrderItemSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source="menu_item_id", read_only=True)
    price = _money()

    class Meta:
        model = OrderItem
        fields = ["id", "name", "price", "quantity"]


class SyncOrderSerializer(serializers.ModelSerializer):
    items = SyncOrderItemSerializer(many=True, read_only=True)
    subtotal = _money()
    tax = _money()
    serviceChargeValue = _money("service_charge_value")
    discountValue = _money("discount_value")
    total = _money()
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    cashReceived = _money("cash_received")
    vatRate = serializers.SerializerMethodField()
    syncStatus = serializers.CharField(source="sync_status", read_only=True)
    reversalOf = serializers.CharField(source="reversal_of_id", read_only=True, allow_null=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)
    readyAt = serializers.DateTimeField(source="ready_at", read_only=True)
    preparationTimeInSeconds = serializers.IntegerField(source="preparation_time_seconds", read_only=True)
    shiftId = serializers.CharField(source="shift_id", read_only=True, allow_null=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "items",
            "subtotal",
            "tax",
            "serviceChargeValue",
            "discountValue",
            "total",
            "timestamp",
            "paymentMethod",
            "cashReceived",
            "vatRate",
            "status",
            "syncStatus",
            "reversalOf",
            "cancelledAt",
            "readyAt",
            "preparationTimeInSeconds",
            "shiftId",
        ]

    def get_vatRate(self, obj):
        # The remote ledger stores VAT as a fraction (0.07 for 7%)
        return float(obj.vat_rate / HUNDRED)


class SyncRunSerializer(serializers.ModelSerializer):
    duration_seconds = serializers.FloatField(read_only=True)

    class Meta:
        model = SyncRun
        fields = [
            "id",
            "trigger",
            "status",
            "started_at",
            "finished_at",
            "duration_seconds",
            "order_count",
            "error",
            "remote_message",
        ]
        read_only_fields = fields
