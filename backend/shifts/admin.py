from django.contrib import admin

from .models import CashDrawerActivity, Shift


class CashDrawerActivityInline(admin.TabularInline):
    model = CashDrawerActivity
    extra = 0
    can_delete = False
    ordering = ("sequence",)
    readonly_fields = ("sequence", "timestamp", "type", "amount", "payment_method", "description", "order")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Shift)
class ShiftAdmin(admin.ModelAdmin):
    list_display = ("id", "status", "start_time", "end_time", "opening_float_amount", "cash_over_short")
    list_filter = ("status",)
    inlines = [CashDrawerActivityInline]

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in Shift._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
