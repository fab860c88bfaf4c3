# loans/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from core.serializers import ChangedFieldsUpdateMixin
from loans.models import Loan
from loans.services.payments import PAYMENT_TYPES


class LoanSerializer(ChangedFieldsUpdateMixin, serializers.ModelSerializer):
    """
    `amount` is the opening principal on create. Afterwards it is read-only:
    only payments move it.
    """

    class Meta:
        model = Loan
        fields = [
            "id",
            "name",
            "amount",
            "currency",
            "notes",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "status", "archived_at", "created_at", "updated_at")

    def get_fields(self):
        fields = super().get_fields()
        if isinstance(self.instance, Loan):
            fields["amount"].read_only = True
        return fields

    def validate_amount(self, value):
        if value < 0:
            raise serializers.ValidationError("Loan amount cannot be negative.")
        return value


class LoanPaymentSerializer(serializers.Serializer):
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    type = serializers.ChoiceField(choices=PAYMENT_TYPES)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    account_id = serializers.IntegerField(required=False, allow_null=True)
