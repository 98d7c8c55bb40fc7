from django.contrib import admin

from .models import GlobalSettings


@admin.register(GlobalSettings)
class GlobalSettingsAdmin(admin.ModelAdmin):
    fieldsets = (
        ("Store", {"fields": ("shop_name", "currency")}),
        (
            "Tax & service charge",
            {
                "fields": (
                    "vat_enabled_by_default",
                    "vat_rate_percent",
                    "service_charge_enabled",
                    "service_charge_rate_percent",
                )
            },
        ),
        ("Shifts", {"fields": ("max_shifts_per_day",)}),
        (
            "Remote sync",
            {
                "fields": (
                    "auto_sync_enabled",
                    "sync_interval_minutes",
                    "sync_batch_size",
                    "remote_ledger_url",
                )
            },
        ),
        ("Reporting", {"fields": ("daily_summary_mode",)}),
    )

    def has_add_permission(self, request):
        return not GlobalSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
