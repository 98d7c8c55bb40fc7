from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("menu_item_id", "name", "price", "quantity")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-only view of the order ledger. Orders change only through
    OrderService (place, advance, complete, cancel).
    """

    list_display = ("id", "timestamp", "status", "payment_method", "total", "sync_status", "shift")
    list_filter = ("status", "sync_status", "payment_method")
    search_fields = ("id",)
    date_hierarchy = "timestamp"
    inlines = [OrderItemInline]

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in Order._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
