# sales/api/serializers.py

from rest_framework import serializers

from banking.api.serializers import AccountRefSerializer
from sales.models import DailySale, SafedropResolution


class DailySaleSerializer(serializers.ModelSerializer):
    total_product_sale = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_counter_sale = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    grand_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = DailySale
        fields = [
            "id",
            "date",
            "fuel_sale",
            "store_sale",
            "gst",
            "store_discount",
            "penny_rounding",
            "daily_total",
            "card",
            "cash",
            "coupon",
            "delivery",
            "reported_total",
            "number_of_safedrops",
            "safedrops_amount",
            "cash_on_hand",
            "approval_status",
            "notes",
            "total_product_sale",
            "total_counter_sale",
            "grand_total",
            "user",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "user", "status", "archived_at", "created_at", "updated_at")

    def validate_approval_status(self, value):
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if value == DailySale.APPROVAL_APPROVED and not (user and user.is_admin):
            raise serializers.ValidationError("Only admins can approve a daily sale.")
        return value


class SafedropResolutionSerializer(serializers.ModelSerializer):
    account = AccountRefSerializer(read_only=True)
    daily_sale_date = serializers.DateField(source="daily_sale.date", read_only=True)
    reference_number = serializers.CharField(read_only=True)
    user = serializers.EmailField(source="user.email", read_only=True, default=None)

    class Meta:
        model = SafedropResolution
        fields = [
            "id",
            "daily_sale",
            "daily_sale_date",
            "account",
            "amount",
            "type",
            "notes",
            "reference_number",
            "transaction",
            "reversed_at",
            "user",
            "created_at",
        ]
        read_only_fields = fields


class AllocationSerializer(serializers.Serializer):
    bank_account_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


class ResolveSerializer(serializers.Serializer):
    """
    Either a single target:
        {"daily_sale_id", "target_account_id", "amount", "type"?, "notes"?}
    or a batch for one sale and type:
        {"daily_sale_id", "type"?, "resolutions": [{"bank_account_id", "amount", "notes"?}]}
    """

    daily_sale_id = serializers.IntegerField()
    type = serializers.ChoiceField(
        choices=SafedropResolution.TYPE_CHOICES,
        default=SafedropResolution.TYPE_SAFEDROPS,
    )
    target_account_id = serializers.IntegerField(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")
    resolutions = AllocationSerializer(many=True, required=False)

    def validate(self, attrs):
        batch = attrs.get("resolutions")
        single = attrs.get("target_account_id") is not None or attrs.get("amount") is not None

        if batch and single:
            raise serializers.ValidationError(
                {"resolutions": ["Send either resolutions or target_account_id/amount, not both."]}
            )
        if batch is not None and not batch:
            raise serializers.ValidationError({"resolutions": ["At least one resolution is required."]})
        if not batch:
            if attrs.get("target_account_id") is None:
                raise serializers.ValidationError({"target_account_id": ["This field is required."]})
            if attrs.get("amount") is None:
                raise serializers.ValidationError({"amount": ["This field is required."]})
        return attrs

    def allocations(self) -> list[dict]:
        data = self.validated_data
        if data.get("resolutions"):
            return [
                {"account_id": r["bank_account_id"], "amount": r["amount"], "notes": r.get("notes", "")}
                for r in data["resolutions"]
            ]
        return [
            {
                "account_id": data["target_account_id"],
                "amount": data["amount"],
                "notes": data.get("notes", ""),
            }
        ]


class PendingBucketSerializer(serializers.Serializer):
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    resolved_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class PendingResolutionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    date = serializers.DateField()
    user = serializers.CharField(allow_null=True)
    safedrops = PendingBucketSerializer()
    cash_in_hand = PendingBucketSerializer()
