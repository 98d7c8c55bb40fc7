from rest_framework import serializers

from .models import CashDrawerActivity, Shift


class CashDrawerActivitySerializer(serializers.ModelSerializer):
    class Meta:
        model = CashDrawerActivity
        fields = ["id", "sequence", "timestamp", "type", "amount", "payment_method", "description", "order"]
        read_only_fields = fields


class ShiftSerializer(serializers.ModelSerializer):
    class Meta:
        model = Shift
        fields = [
            "id",
            "status",
            "start_time",
            "end_time",
            "last_activity_at",
            "opening_float_amount",
            "closing_cash_counted",
            "cash_for_next_shift",
            "expected_cash_in_drawer",
            "cash_over_short",
            "cash_to_deposit",
            "total_sales",
            "total_cash_sales",
            "total_qr_sales",
            "total_paid_in",
            "total_paid_out",
            "total_refunds",
        ]
        read_only_fields = fields


class ShiftDetailSerializer(ShiftSerializer):
    activities = CashDrawerActivitySerializer(many=True, read_only=True)

    class Meta(ShiftSerializer.Meta):
        fields = ShiftSerializer.Meta.fields + ["activities"]
        read_only_fields = fields


class DrawerSummarySerializer(serializers.Serializer):
    shift_id = serializers.CharField()
    opening_float = serializers.DecimalField(max_digits=14, decimal_places=2)
    cash_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    qr_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    paid_in = serializers.DecimalField(max_digits=14, decimal_places=2)
    paid_out = serializers.DecimalField(max_digits=14, decimal_places=2)
    cash_refunds = serializers.DecimalField(max_digits=14, decimal_places=2)
    qr_refunds = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_refunds = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_sales = serializers.DecimalField(max_digits=14, decimal_places=2)
    expected_cash = serializers.DecimalField(max_digits=14, decimal_places=2)
    activity_count = serializers.IntegerField()


class StartShiftSerializer(serializers.Serializer):
    opening_float = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class EndShiftSerializer(serializers.Serializer):
    closing_cash_counted = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    cash_for_next_shift = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)


class PaidInOutSerializer(serializers.Serializer):
    type = serializers.ChoiceField(
        choices=[
            CashDrawerActivity.ActivityType.PAID_IN,
            CashDrawerActivity.ActivityType.PAID_OUT,
        ]
    )
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class DrawerOpenSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
