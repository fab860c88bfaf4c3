# sales/admin.py

from django.contrib import admin

from sales.models import DailySale, SafedropResolution


@admin.register(DailySale)
class DailySaleAdmin(admin.ModelAdmin):
    list_display = ("date", "reported_total", "safedrops_amount", "cash_on_hand", "approval_status", "status")
    list_filter = ("approval_status", "status")
    date_hierarchy = "date"

    def get_queryset(self, request):
        return DailySale.all_objects.all()


@admin.register(SafedropResolution)
class SafedropResolutionAdmin(admin.ModelAdmin):
    list_display = ("id", "daily_sale", "account", "type", "amount", "reversed_at", "created_at")
    list_filter = ("type",)
    readonly_fields = [f.name for f in SafedropResolution._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
