from django.contrib import admin

from .models import DailySummary


@admin.register(DailySummary)
class DailySummaryAdmin(admin.ModelAdmin):
    list_display = ("date", "total_sales", "transaction_count", "updated_at")
    date_hierarchy = "date"
    readonly_fields = ("date", "total_sales", "transaction_count", "updated_at")

    def has_add_permission(self, request):
        return False
