# core/pagination.py

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class PerPagePagination(PageNumberPagination):
    """
    ?page=N&per_page=M

    Envelope:
        {"data": [...], "current_page", "per_page", "total", "last_page"}
    """

    page_size = 10
    page_size_query_param = "per_page"
    max_page_size = 100

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        return Response(
            {
                "data": data,
                "current_page": self.page.number,
                "per_page": paginator.per_page,
                "total": paginator.count,
                "last_page": paginator.num_pages,
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "data": schema,
                "current_page": {"type": "integer"},
                "per_page": {"type": "integer"},
                "total": {"type": "integer"},
                "last_page": {"type": "integer"},
            },
        }


class SortableMixin:
    """
    ?sort_by=<field>&sort_direction=asc|desc

    Unknown fields fall back to `default_sort`; direction defaults to desc.
    """

    sort_fields: tuple[str, ...] = ("id", "created_at", "updated_at")
    default_sort = "created_at"

    def get_sort_fields(self) -> tuple[str, ...]:
        return self.sort_fields

    def sort_queryset(self, qs):
        params = self.request.query_params
        sort_by = (params.get("sort_by") or self.default_sort).strip()
        if sort_by not in self.get_sort_fields():
            sort_by = self.default_sort

        direction = (params.get("sort_direction") or "desc").strip().lower()
        prefix = "" if direction == "asc" else "-"
        return qs.order_by(f"{prefix}{sort_by}", f"{prefix}pk")
