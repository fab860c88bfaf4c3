# fuel/api/views.py

"""
/api/fuel/prices/           CRUD + archive / restore / force-delete
/api/fuel/prices/latest/    most recent entry visible to the caller

Writes go through save_fuel_price() so the spreadsheet sync job is queued in
the same transaction. Editors only see their own entries.
"""

from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action
from rest_framework.response import Response

from core.api import LifecycleViewSet
from fuel.api.serializers import FuelPriceSerializer
from fuel.models import FuelPrice
from fuel.services.prices import save_fuel_price


@extend_schema(tags=["fuel"])
class FuelPriceViewSet(LifecycleViewSet):
    model = FuelPrice
    serializer_class = FuelPriceSerializer
    sort_fields = (
        "id",
        "date",
        "shift",
        "regular_price",
        "midgrade_price",
        "premium_price",
        "diesel_price",
        "created_at",
        "updated_at",
    )

    def scope_queryset(self, qs):
        qs = qs.select_related("user")
        user = self.request.user
        if user.is_admin:
            return qs
        return qs.filter(user=user)

    def perform_create(self, serializer):
        serializer.instance = save_fuel_price(data=serializer.validated_data, user=self.request.user)

    def perform_update(self, serializer):
        serializer.instance = save_fuel_price(data=serializer.validated_data, instance=serializer.instance)

    @action(detail=False, methods=["get"])
    def latest(self, request, *args, **kwargs):
        qs = self.scope_queryset(FuelPrice.objects.all()).order_by("-created_at", "-pk")
        instance = qs.first()
        return Response({"data": self.get_serializer(instance).data if instance else None})
