# banking/admin.py

from django.contrib import admin

from banking.models import Account, Transaction


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("id", "bank_name", "account_name", "account_type", "balance", "is_active", "status")
    list_filter = ("account_type", "is_active", "status")
    search_fields = ("bank_name", "account_name")
    readonly_fields = ("balance", "created_at", "updated_at")

    def get_queryset(self, request):
        return Account.all_objects.all()


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "amount", "transaction_date", "reference_number", "state")
    list_filter = ("type", "state", "transaction_date")
    search_fields = ("description", "reference_number")

    def get_queryset(self, request):
        return Transaction.all_objects.all()

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
