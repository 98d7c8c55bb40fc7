from rest_framework import serializers

from .models import GlobalSettings


class GlobalSettingsSerializer(serializers.ModelSerializer):
    """
    Serializer for the GlobalSettings singleton.
    """

    class Meta:
        model = GlobalSettings
        fields = [
            # Store
            "shop_name",
            "currency",
            # Tax & service charge
            "vat_enabled_by_default",
            "vat_rate_percent",
            "service_charge_enabled",
            "service_charge_rate_percent",
            # Shifts
            "max_shifts_per_day",
            # Remote sync
            "auto_sync_enabled",
            "sync_interval_minutes",
            "sync_batch_size",
            "remote_ledger_url",
            # Reporting
            "daily_summary_mode",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_currency(self, value):
        if len(value) != 3 or not value.isalpha():
            raise serializers.ValidationError("Currency must be a three-letter ISO 4217 code.")
        return value.upper()
