from django.contrib import admin

from .models import SyncLease, SyncRun


@admin.register(SyncRun)
class SyncRunAdmin(admin.ModelAdmin):
    list_display = ("started_at", "trigger", "status", "order_count", "finished_at")
    list_filter = ("status", "trigger")
    readonly_fields = [f.name for f in SyncRun._meta.fields]

    def has_add_permission(self, request):
        return False


@admin.register(SyncLease)
class SyncLeaseAdmin(admin.ModelAdmin):
    list_display = ("holder", "trigger", "acquired_at", "expires_at")
    readonly_fields = [f.name for f in SyncLease._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
