# core/api.py

"""
======================================================
PATH: core/api.py
======================================================
LIFECYCLE VIEWSET

CRUD + the soft-delete / restore / force-delete triple every resource exposes:

    GET    /<resource>/                 active rows, paginated + sorted
    POST   /<resource>/                 create
    GET    /<resource>/{id}/            retrieve (active only)
    PATCH  /<resource>/{id}/            update
    DELETE /<resource>/{id}/            archive (soft delete)
    GET    /<resource>/with-trashed/    active + archived rows
    POST   /<resource>/{id}/restore/    archived -> active
    DELETE /<resource>/{id}/force/      purge (irreversible, admin only)

Policy:
- Reads: any authenticated non-staff user
- Writes: admin or editor
- Purge: admin
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.pagination import PerPagePagination, SortableMixin
from users.permissions import IsAdmin, IsAdminOrEditor, IsNotStaff

READ_ACTIONS = {"list", "retrieve", "with_trashed"}
TRASH_ACTIONS = {"with_trashed", "restore", "force_delete"}


class LifecycleViewSet(SortableMixin, viewsets.ModelViewSet):
    model = None
    pagination_class = PerPagePagination
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]

    def get_permissions(self):
        if self.action in READ_ACTIONS:
            return [IsAuthenticated(), IsNotStaff()]
        if self.action == "force_delete":
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated(), IsNotStaff(), IsAdminOrEditor()]

    def get_sort_fields(self):
        fields = tuple(self.sort_fields)
        if self.action == "with_trashed":
            fields += ("archived_at",)
        return fields

    def scope_queryset(self, qs):
        """Per-user row scoping hook (editors see their own rows, etc.)."""
        return qs

    def get_queryset(self):
        manager = self.model.all_objects if self.action in TRASH_ACTIONS else self.model.objects
        qs = self.scope_queryset(manager.all())
        return self.sort_queryset(qs)

    @property
    def label(self) -> str:
        return str(self.model._meta.verbose_name).capitalize()

    # -------------------------------------------------
    # CRUD (enveloped)
    # -------------------------------------------------
    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        return Response({"data": self.get_serializer(instance).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return Response(
            {
                "message": f"{self.label} created successfully",
                "data": self.get_serializer(serializer.instance).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response(
            {
                "message": f"{self.label} updated successfully",
                "data": self.get_serializer(serializer.instance).data,
            }
        )

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        instance.archive()
        return Response({"message": f"{self.label} deleted successfully"})

    # -------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------
    @action(detail=False, methods=["get"], url_path="with-trashed")
    def with_trashed(self, request, *args, **kwargs):
        return self.list(request, *args, **kwargs)

    @action(detail=True, methods=["post"])
    def restore(self, request, *args, **kwargs):
        instance = self.get_object()
        instance.restore()
        return Response(
            {
                "message": f"{self.label} restored successfully",
                "data": self.get_serializer(instance).data,
            }
        )

    @action(detail=True, methods=["delete"], url_path="force")
    def force_delete(self, request, *args, **kwargs):
        instance = self.get_object()
        instance.purge()
        return Response({"message": f"{self.label} permanently deleted"})
