# fuel/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from fuel.models import FuelPrice

PRICE_KWARGS = {
    "max_digits": 8,
    "decimal_places": 3,
    "min_value": Decimal("0"),
    "max_value": Decimal("999.999"),
    "required": False,
    "allow_null": True,
}


class FuelPriceSerializer(serializers.ModelSerializer):
    regular_price = serializers.DecimalField(**PRICE_KWARGS)
    midgrade_price = serializers.DecimalField(**PRICE_KWARGS)
    premium_price = serializers.DecimalField(**PRICE_KWARGS)
    diesel_price = serializers.DecimalField(**PRICE_KWARGS)
    user = serializers.SerializerMethodField()

    class Meta:
        model = FuelPrice
        fields = [
            "id",
            "date",
            "shift",
            "regular_price",
            "midgrade_price",
            "premium_price",
            "diesel_price",
            "added_regular",
            "user",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "user", "status", "archived_at", "created_at", "updated_at")

    def get_user(self, obj):
        if obj.user_id is None:
            return None
        return {"id": str(obj.user_id), "name": obj.user.name}
