# expenses/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework.decorators import action
from rest_framework.response import Response

from core.api import LifecycleViewSet
from expenses.api.serializers import ExpenseTypeSerializer
from expenses.models import ExpenseType


@extend_schema(tags=["expense-types"])
class ExpenseTypeViewSet(LifecycleViewSet):
    """
    /api/expense-types/         CRUD + archive / restore / force-delete
    /api/expense-types/roots/   top-level types with their children
    """

    model = ExpenseType
    serializer_class = ExpenseTypeSerializer
    sort_fields = ("id", "expense_type", "parent_id", "created_at", "updated_at")

    def scope_queryset(self, qs):
        return qs.select_related("parent").prefetch_related("children")

    @action(detail=False, methods=["get"])
    def roots(self, request, *args, **kwargs):
        qs = (
            ExpenseType.objects.filter(parent__isnull=True)
            .prefetch_related("children")
            .order_by("expense_type")
        )
        return Response({"data": self.get_serializer(qs, many=True).data})
