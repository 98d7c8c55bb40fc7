from rest_framework import serializers

from .models import DailySummary


class DailySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = DailySummary
        fields = ["date", "total_sales", "transaction_count", "updated_at"]
        read_only_fields = fields


class RebuildDailySummarySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get("date"):
            attrs["start_date"] = attrs["end_date"] = attrs["date"]
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if not start or not end:
            raise serializers.ValidationError("Provide 'date', or both 'start_date' and 'end_date'.")
        if start > end:
            raise serializers.ValidationError("'start_date' must not be after 'end_date'.")
        if (end - start).days > 366:
            raise serializers.ValidationError("Rebuild at most one year at a time.")
        return attrs
