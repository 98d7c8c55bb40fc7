from rest_framework import serializers

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "menu_item_id", "name", "price", "quantity", "total_price"]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    is_reversal = serializers.BooleanField(read_only=True)
    change_due = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    reversal_id = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "shift",
            "timestamp",
            "items",
            "subtotal",
            "discount_value",
            "service_charge_value",
            "tax",
            "vat_rate",
            "total",
            "payment_method",
            "cash_received",
            "change_due",
            "status",
            "sync_status",
            "synced_at",
            "is_reversal",
            "reversal_of",
            "reversal_id",
            "cancelled_at",
            "ready_at",
            "preparation_time_seconds",
        ]
        read_only_fields = fields

    def get_reversal_id(self, obj):
        reversal = getattr(obj, "reversal", None) if obj.status == Order.OrderStatus.CANCELLED else None
        return reversal.id if reversal else None


class CartLineSerializer(serializers.Serializer):
    menu_item_id = serializers.CharField(required=False, allow_blank=True, default="")
    name = serializers.CharField(max_length=200)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1, default=1)


class PlaceOrderSerializer(serializers.Serializer):
    items = CartLineSerializer(many=True, allow_empty=True)
    payment_method = serializers.ChoiceField(choices=Order.PaymentMethod.choices)
    cash_received = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    discount = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    vat_enabled = serializers.BooleanField(required=False, allow_null=True, default=None)


class AdvanceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.OrderStatus.choices)
