# loans/admin.py

from django.contrib import admin

from loans.models import Loan


@admin.register(Loan)
class LoanAdmin(admin.ModelAdmin):
    list_display = ("name", "amount", "currency", "status", "updated_at")
    list_filter = ("status", "currency")
    search_fields = ("name",)

    def get_queryset(self, request):
        return Loan.all_objects.all()
