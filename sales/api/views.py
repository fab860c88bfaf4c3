# sales/api/views.py

"""
SALES API

/api/sales/daily-sales/                 CRUD + archive / restore / force-delete
                                        (editors only see their own days)
/api/sales/safedrops/pending/           GET  pending safedrop / cash-in-hand amounts
/api/sales/safedrops/                   POST resolve (admin only)
/api/sales/safedrops/history/           GET  resolution history, newest first
/api/sales/safedrops/{id}/reverse/      POST reverse a resolution (admin only)
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api import LifecycleViewSet
from core.pagination import PerPagePagination
from sales.api.serializers import (
    DailySaleSerializer,
    PendingResolutionSerializer,
    ResolveSerializer,
    SafedropResolutionSerializer,
)
from sales.models import DailySale
from sales.services.safedrops import (
    amend_daily_sale,
    pending_resolutions,
    resolution_history,
    resolve_safedrops,
    reverse_resolution,
)
from users.permissions import IsAdmin, IsNotStaff


@extend_schema(tags=["sales"])
class DailySaleViewSet(LifecycleViewSet):
    model = DailySale
    serializer_class = DailySaleSerializer
    sort_fields = ("id", "date", "reported_total", "created_at", "updated_at")
    default_sort = "date"

    def scope_queryset(self, qs):
        user = self.request.user
        if user.is_admin:
            return qs
        return qs.filter(user=user)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    def perform_update(self, serializer):
        serializer.instance = amend_daily_sale(
            sale=serializer.instance,
            data=dict(serializer.validated_data),
        )


@extend_schema(tags=["sales"])
class SafedropViewSet(viewsets.GenericViewSet):
    serializer_class = SafedropResolutionSerializer
    pagination_class = PerPagePagination

    def get_permissions(self):
        if self.action in ("create", "reverse"):
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated(), IsNotStaff()]

    def get_queryset(self):
        return resolution_history(self.request.user)

    @extend_schema(responses={200: PendingResolutionSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def pending(self, request, *args, **kwargs):
        items = pending_resolutions(request.user)
        return Response({"data": PendingResolutionSerializer(items, many=True).data})

    @extend_schema(request=ResolveSerializer, responses={201: SafedropResolutionSerializer(many=True)})
    def create(self, request, *args, **kwargs):
        s = ResolveSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        created = resolve_safedrops(
            daily_sale_id=s.validated_data["daily_sale_id"],
            allocations=s.allocations(),
            resolution_type=s.validated_data["type"],
            user=request.user,
        )
        return Response(
            {
                "message": "Resolution completed successfully",
                "data": SafedropResolutionSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: SafedropResolutionSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def history(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @extend_schema(request=None, responses={200: SafedropResolutionSerializer})
    @action(detail=True, methods=["post"])
    def reverse(self, request, *args, **kwargs):
        resolution = reverse_resolution(resolution=self.get_object(), user=request.user)
        return Response(
            {
                "message": "Resolution reversed successfully",
                "data": SafedropResolutionSerializer(resolution).data,
            }
        )
