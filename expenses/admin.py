# expenses/admin.py

from django.contrib import admin

from expenses.models import ExpenseType


@admin.register(ExpenseType)
class ExpenseTypeAdmin(admin.ModelAdmin):
    list_display = ("expense_type", "parent", "status")
    list_filter = ("status",)
    search_fields = ("expense_type",)

    def get_queryset(self, request):
        return ExpenseType.all_objects.select_related("parent")
