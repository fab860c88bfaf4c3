# fuel/admin.py

from django.contrib import admin

from fuel.models import FuelPrice


@admin.register(FuelPrice)
class FuelPriceAdmin(admin.ModelAdmin):
    list_display = ("date", "shift", "regular_price", "premium_price", "diesel_price", "status")
    list_filter = ("shift", "status")
    date_hierarchy = "date"

    def get_queryset(self, request):
        return FuelPrice.all_objects.select_related("user")
