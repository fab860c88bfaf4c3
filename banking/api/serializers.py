# banking/api/serializers.py

from rest_framework import serializers

from banking.models import Account, Transaction
from core.serializers import ChangedFieldsUpdateMixin


class AccountSerializer(ChangedFieldsUpdateMixin, serializers.ModelSerializer):
    """
    balance is ledger-owned: read-only here. `opening_balance` is accepted on
    create and posted as an OB-<id> transaction.
    """

    opening_balance = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, write_only=True
    )
    masked_account_number = serializers.CharField(read_only=True)
    is_cash = serializers.BooleanField(read_only=True)

    class Meta:
        model = Account
        fields = [
            "id",
            "bank_name",
            "account_name",
            "account_number",
            "masked_account_number",
            "account_type",
            "routing_number",
            "swift_code",
            "currency",
            "balance",
            "opening_balance",
            "is_active",
            "is_cash",
            "notes",
            "owner",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = (
            "id",
            "balance",
            "owner",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {"account_number": {"write_only": True}}

    def update(self, instance, validated_data):
        validated_data.pop("opening_balance", None)
        return super().update(instance, validated_data)


class AccountRefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Account
        fields = ["id", "bank_name", "account_name", "masked_account_number"]


class TransactionSerializer(serializers.ModelSerializer):
    account = AccountRefSerializer(read_only=True)
    from_account = AccountRefSerializer(read_only=True)
    to_account = AccountRefSerializer(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "type",
            "amount",
            "description",
            "notes",
            "category",
            "account",
            "from_account",
            "to_account",
            "transaction_date",
            "reference_number",
            "state",
            "voided_at",
            "user",
            "created_at",
        ]
        read_only_fields = fields


class TransactionCreateSerializer(serializers.Serializer):
    """
    Manual income / expense entry. Transfers go through /transfers/.
    """

    type = serializers.ChoiceField(choices=[Transaction.TYPE_INCOME, Transaction.TYPE_EXPENSE])
    account_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField(max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, allow_blank=True, max_length=100, default="")
    transaction_date = serializers.DateField(required=False)
    reference_number = serializers.CharField(
        required=False, allow_blank=True, max_length=100, default=""
    )

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0.")
        return value


class TransferCreateSerializer(serializers.Serializer):
    from_account_id = serializers.IntegerField()
    to_account_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField(max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    transaction_date = serializers.DateField(required=False)
    reference_number = serializers.CharField(
        required=False, allow_blank=True, max_length=100, default=""
    )

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0.")
        return value

    def validate(self, attrs):
        if attrs["from_account_id"] == attrs["to_account_id"]:
            raise serializers.ValidationError(
                {"to_account_id": ["Source and destination accounts must be different."]}
            )
        return attrs


class TransferSummarySerializer(serializers.Serializer):
    total_transfers = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    avg_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    largest_transfer = serializers.DecimalField(max_digits=14, decimal_places=2)
    smallest_transfer = serializers.DecimalField(max_digits=14, decimal_places=2)
