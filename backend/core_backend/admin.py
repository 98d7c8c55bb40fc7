from django.contrib import admin

from .models import SystemLog


@admin.register(SystemLog)
class SystemLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "type", "level", "message", "order_id", "shift_id")
    list_filter = ("type", "level")
    search_fields = ("message", "order_id", "shift_id")
    date_hierarchy = "timestamp"
    readonly_fields = ("timestamp", "type", "level", "message", "details", "order_id", "shift_id")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
